"""Shared test fixtures for the shorts bot test suite."""

import os
import sys

import pytest

# Add project root to path
PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_DIR)

from shortsbot.config import BotConfig  # noqa: E402

CONFIG_ENV_VARS = [
    "ELEVENLABS_API_KEY",
    "ELEVENLABS_VOICE_ID",
    "ELEVENLABS_MODEL",
    "DRIVE_FOLDER_ID",
    "GOOGLE_SERVICE_ACCOUNT_FILE",
    "BACKGROUND_VIDEO",
    "OUTPUT_DIR",
    "TEMP_DIR",
    "CAPTION_STYLE",
    "CAPTION_MAX_WORDS",
    "CAPTION_MAX_CHARS",
    "CAPTION_MIN_SECONDS",
]


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, json_data=None, content=b"",
                 reason="OK", text=""):
        self.status_code = status_code
        self._json = json_data
        self.content = content if content else (b"{}" if json_data is not None else b"")
        self.reason = reason
        self.text = text

    def json(self):
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json

    def raise_for_status(self):
        import requests
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}", response=self)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove config variables for the test and restore them afterwards.

    Each variable is set then deleted through monkeypatch so that values
    written later by load_dotenv are rolled back on teardown.
    """
    for name in CONFIG_ENV_VARS:
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def bot_config(tmp_path):
    """BotConfig pointing every path into tmp_path."""
    background = tmp_path / "gameplay.mp4"
    background.write_bytes(b"fake video")
    return BotConfig(
        elevenlabs_api_key="sk_test_1234567890",
        drive_folder_id="folder123",
        service_account_file=str(tmp_path / "service_account.json"),
        background_video=str(background),
        output_dir=str(tmp_path / "output"),
        temp_dir=str(tmp_path / "temp"),
    )


@pytest.fixture
def sample_story_text():
    """A Reddit-style story inside the default 600-2000 character band."""
    return (
        "So this happened last week and I still can't believe it. "
        "My MIL (58F) decided to show up at our house unannounced, again. "
        "AITA for not letting her in? "
        + "She kept knocking on the door for twenty minutes straight. " * 12
        + "\nEdit: thanks for all the replies everyone"
    )
