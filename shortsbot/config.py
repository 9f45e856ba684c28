"""Runtime configuration for the shorts bot.

Values come from a ``.env`` file (python-dotenv) and the process
environment.  The resulting ``BotConfig`` is handed to each collaborator
when it is built, so nothing reads ``os.environ`` after start-up.
"""

import os

from dotenv import load_dotenv

from shortsbot.common import (
    ASSETS_DIR,
    BASE_DIR,
    ENV_PATH,
    OUTPUT_DIR,
    TEMP_DIR,
    PipelineError,
)

DEFAULT_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"  # Rachel
DEFAULT_MODEL = "eleven_turbo_v2_5"


class BotConfig:
    """Settings for one bot run.

    Args:
        elevenlabs_api_key: ElevenLabs API key (required for narration).
        elevenlabs_voice_id: Voice used for narration.
        elevenlabs_model: ElevenLabs model id.
        drive_folder_id: Google Drive folder receiving the uploads.
        service_account_file: Path to the Google service account JSON.
        background_video: Landscape gameplay clip the short is cut from.
        output_dir: Where finished videos are kept.
        temp_dir: Scratch directory for audio and the raw render.
        caption_style: Name of a preset in ``captions.CAPTION_STYLES``.
        max_words: Words per caption fragment.
        max_chars: Characters per caption fragment.
        min_fragment_seconds: Readability floor for a fragment's window.
        subreddits: Subreddit pool scanned for posts (None = defaults).
        min_length: Shortest accepted post, in characters after cleaning.
        max_length: Longest accepted post.
    """

    def __init__(self, elevenlabs_api_key=None,
                 elevenlabs_voice_id=DEFAULT_VOICE_ID,
                 elevenlabs_model=DEFAULT_MODEL,
                 drive_folder_id=None,
                 service_account_file=None,
                 background_video=None,
                 output_dir=OUTPUT_DIR,
                 temp_dir=TEMP_DIR,
                 caption_style="classic",
                 max_words=3,
                 max_chars=25,
                 min_fragment_seconds=0.5,
                 subreddits=None,
                 min_length=600,
                 max_length=2000):
        self.elevenlabs_api_key = elevenlabs_api_key
        self.elevenlabs_voice_id = elevenlabs_voice_id
        self.elevenlabs_model = elevenlabs_model
        self.drive_folder_id = drive_folder_id
        self.service_account_file = service_account_file or os.path.join(
            BASE_DIR, "service_account.json")
        self.background_video = background_video or os.path.join(
            ASSETS_DIR, "gameplay.mp4")
        self.output_dir = output_dir
        self.temp_dir = temp_dir
        self.caption_style = caption_style
        self.max_words = max_words
        self.max_chars = max_chars
        self.min_fragment_seconds = min_fragment_seconds
        self.subreddits = subreddits
        self.min_length = min_length
        self.max_length = max_length

    def __repr__(self):
        return (f"BotConfig(voice={self.elevenlabs_voice_id!r}, "
                f"style={self.caption_style!r}, "
                f"background={self.background_video!r})")


def _env_number(name, default, cast, minimum=None, exclusive=False):
    """Read a numeric setting, enforcing a lower bound when given."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise PipelineError(f"{name} must be a number, got {raw!r}")
    if minimum is not None:
        too_small = value <= minimum if exclusive else value < minimum
        if too_small:
            bound = f"> {minimum}" if exclusive else f">= {minimum}"
            raise PipelineError(f"{name} must be {bound}, got {raw!r}")
    return value


def load_config(env_path=None):
    """Build a BotConfig from a .env file and the environment.

    Args:
        env_path: Optional .env path.  Defaults to ``<project>/.env``;
            a missing file is fine, the process environment still applies.

    Returns:
        BotConfig
    """
    path = env_path or ENV_PATH
    if os.path.exists(path):
        load_dotenv(path)
    elif env_path:
        raise PipelineError(f".env file not found at {env_path}")

    return BotConfig(
        elevenlabs_api_key=os.getenv("ELEVENLABS_API_KEY"),
        elevenlabs_voice_id=os.getenv("ELEVENLABS_VOICE_ID", DEFAULT_VOICE_ID),
        elevenlabs_model=os.getenv("ELEVENLABS_MODEL", DEFAULT_MODEL),
        drive_folder_id=os.getenv("DRIVE_FOLDER_ID"),
        service_account_file=os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE"),
        background_video=os.getenv("BACKGROUND_VIDEO"),
        output_dir=os.getenv("OUTPUT_DIR", OUTPUT_DIR),
        temp_dir=os.getenv("TEMP_DIR", TEMP_DIR),
        caption_style=os.getenv("CAPTION_STYLE", "classic"),
        max_words=_env_number("CAPTION_MAX_WORDS", 3, int, minimum=1),
        max_chars=_env_number("CAPTION_MAX_CHARS", 25, int, minimum=1),
        min_fragment_seconds=_env_number("CAPTION_MIN_SECONDS", 0.5, float,
                                          minimum=0, exclusive=True),
    )
