"""Tests for shortsbot.config and shortsbot.common helpers."""

import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from shortsbot.common import PipelineError, ensure_dir, mask_secret
from shortsbot.config import DEFAULT_MODEL, DEFAULT_VOICE_ID, BotConfig, load_config


class TestLoadConfig:
    def test_reads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "ELEVENLABS_API_KEY=sk_from_file\n"
            "DRIVE_FOLDER_ID=folder_abc\n"
            "CAPTION_STYLE=yellow\n"
            "CAPTION_MAX_WORDS=4\n"
            "CAPTION_MIN_SECONDS=0.75\n"
        )
        config = load_config(str(env_file))
        assert config.elevenlabs_api_key == "sk_from_file"
        assert config.drive_folder_id == "folder_abc"
        assert config.caption_style == "yellow"
        assert config.max_words == 4
        assert config.max_chars == 25
        assert config.min_fragment_seconds == 0.75

    def test_defaults(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("")
        config = load_config(str(env_file))
        assert config.elevenlabs_api_key is None
        assert config.elevenlabs_voice_id == DEFAULT_VOICE_ID
        assert config.elevenlabs_model == DEFAULT_MODEL
        assert config.caption_style == "classic"
        assert config.service_account_file.endswith("service_account.json")
        assert config.background_video.endswith(os.path.join("assets", "gameplay.mp4"))

    def test_process_env_wins_over_file(self, clean_env, tmp_path):
        clean_env.setenv("ELEVENLABS_VOICE_ID", "from_env")
        env_file = tmp_path / ".env"
        env_file.write_text("ELEVENLABS_VOICE_ID=from_file\n")
        assert load_config(str(env_file)).elevenlabs_voice_id == "from_env"

    def test_bad_number(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("CAPTION_MAX_CHARS=lots\n")
        with pytest.raises(PipelineError, match="CAPTION_MAX_CHARS must be a number"):
            load_config(str(env_file))

    @pytest.mark.parametrize("line,name", [
        ("CAPTION_MAX_WORDS=0", "CAPTION_MAX_WORDS"),
        ("CAPTION_MAX_CHARS=0", "CAPTION_MAX_CHARS"),
        ("CAPTION_MIN_SECONDS=0", "CAPTION_MIN_SECONDS"),
        ("CAPTION_MIN_SECONDS=-0.5", "CAPTION_MIN_SECONDS"),
    ])
    def test_out_of_range_caption_settings(self, clean_env, tmp_path, line, name):
        env_file = tmp_path / ".env"
        env_file.write_text(line + "\n")
        with pytest.raises(PipelineError, match=f"{name} must be"):
            load_config(str(env_file))

    def test_smallest_valid_caption_settings(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "CAPTION_MAX_WORDS=1\nCAPTION_MAX_CHARS=1\nCAPTION_MIN_SECONDS=0.01\n")
        config = load_config(str(env_file))
        assert (config.max_words, config.max_chars) == (1, 1)
        assert config.min_fragment_seconds == 0.01

    def test_missing_explicit_env_file(self, clean_env, tmp_path):
        with pytest.raises(PipelineError, match=".env file not found"):
            load_config(str(tmp_path / "nope.env"))


class TestBotConfig:
    def test_defaults(self):
        config = BotConfig()
        assert config.max_words == 3
        assert config.max_chars == 25
        assert config.min_fragment_seconds == 0.5
        assert config.min_length == 600
        assert config.max_length == 2000
        assert config.subreddits is None

    def test_repr_hides_secrets(self):
        config = BotConfig(elevenlabs_api_key="sk_secret_value")
        assert "sk_secret_value" not in repr(config)


class TestCommon:
    def test_mask_secret(self):
        assert mask_secret("sk_abcdefghijklmnop") == "sk_ab...mnop (19 chars)"
        assert mask_secret("") == "<unset>"
        assert mask_secret("short") == "*****"

    def test_ensure_dir(self, tmp_path):
        target = tmp_path / "a" / "b"
        assert ensure_dir(str(target)) == str(target)
        assert target.is_dir()
