"""Reddit-story shorts bot: captions, narration, rendering and upload."""

from shortsbot.captions import (
    CAPTION_STYLES,
    allocate_timings,
    build_caption_filter,
    chunk_text,
    escape_drawtext,
    generate_subtitle_filter,
    get_caption_style,
)
from shortsbot.common import PipelineError
from shortsbot.config import BotConfig, load_config

__all__ = [
    "CAPTION_STYLES",
    "allocate_timings",
    "build_caption_filter",
    "chunk_text",
    "escape_drawtext",
    "generate_subtitle_filter",
    "get_caption_style",
    "PipelineError",
    "BotConfig",
    "load_config",
]
