"""Common paths and helpers shared across the shorts bot."""

import os

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
OUTPUT_DIR = os.path.join(BASE_DIR, "output")
TEMP_DIR = os.path.join(BASE_DIR, "temp")
ASSETS_DIR = os.path.join(BASE_DIR, "assets")
ENV_PATH = os.path.join(BASE_DIR, ".env")


class PipelineError(RuntimeError):
    """A boundary failure that aborts the whole run."""


def ensure_dir(path):
    """Create *path* (and parents) if missing. Returns the path."""
    os.makedirs(path, exist_ok=True)
    return path


def mask_secret(value, head=5, tail=4):
    """Mask an API key for console output, e.g. ``sk_ab...wxyz (32 chars)``."""
    if not value:
        return "<unset>"
    if len(value) <= head + tail:
        return "*" * len(value)
    return f"{value[:head]}...{value[-tail:]} ({len(value)} chars)"


def file_size_mb(path):
    """Size of *path* in megabytes."""
    return os.path.getsize(path) / (1024 * 1024)
