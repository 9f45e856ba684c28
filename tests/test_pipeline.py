"""Tests for shortsbot.pipeline with every external stage faked."""

import os
import random
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from shortsbot.common import PipelineError
from shortsbot.pipeline import ShortsPipeline

POST = {
    "title": "TIFU by forgetting my own birthday",
    "content": "Long story here. " * 40,
    "id": "xyz789",
    "subreddit": "tifu",
}


class FakeNarrator:
    def __init__(self, temp_dir):
        self.temp_dir = temp_dir
        self.texts = []

    def generate_audio(self, text):
        self.texts.append(text)
        os.makedirs(self.temp_dir, exist_ok=True)
        path = os.path.join(self.temp_dir, "audio.mp3")
        with open(path, "wb") as f:
            f.write(b"mp3")
        return {"path": path, "duration": 31.25}


class FakeStore:
    def __init__(self):
        self.uploads = []

    def upload(self, path, name):
        self.uploads.append((path, name))
        return f"https://drive.google.com/file/d/{name}/view"


def fake_render(calls):
    def render(audio_path, duration, text, config, rng):
        calls.append((audio_path, duration, text))
        os.makedirs(config.temp_dir, exist_ok=True)
        out = os.path.join(config.temp_dir, "final_video.mp4")
        with open(out, "wb") as f:
            f.write(b"video")
        return out
    return render


def _pipeline(bot_config, post=POST, **overrides):
    render_calls = []
    parts = {
        "fetch_post": lambda cfg, rng: post,
        "narrator": FakeNarrator(bot_config.temp_dir),
        "render": fake_render(render_calls),
        "store": FakeStore(),
        "rng": random.Random(0),
    }
    parts.update(overrides)
    return ShortsPipeline(bot_config, **parts), parts, render_calls


class TestShortsPipeline:
    def test_full_run(self, bot_config):
        pipeline, parts, render_calls = _pipeline(bot_config)
        result = pipeline.run()

        final_path = os.path.join(bot_config.output_dir, "xyz789.mp4")
        assert result == {
            "post_id": "xyz789",
            "local_path": final_path,
            "drive_url": "https://drive.google.com/file/d/xyz789.mp4/view",
        }
        assert os.path.exists(final_path)
        assert not os.path.exists(os.path.join(bot_config.temp_dir, "final_video.mp4"))
        assert parts["narrator"].texts == [POST["content"]]
        assert render_calls == [(os.path.join(bot_config.temp_dir, "audio.mp3"),
                                 31.25, POST["content"])]
        assert parts["store"].uploads == [(final_path, "xyz789.mp4")]

    def test_no_post_stops_early(self, bot_config, capsys):
        pipeline, parts, render_calls = _pipeline(bot_config, post=None)
        assert pipeline.run() is None
        assert parts["narrator"].texts == []
        assert render_calls == []
        assert parts["store"].uploads == []
        assert "No suitable post found" in capsys.readouterr().out

    def test_stage_failure_propagates(self, bot_config):
        def broken_render(*args):
            raise PipelineError("ffmpeg render failed: boom")

        pipeline, parts, _ = _pipeline(bot_config, render=broken_render)
        with pytest.raises(PipelineError, match="boom"):
            pipeline.run()
        assert parts["store"].uploads == []

    def test_move_failure_becomes_pipeline_error(self, bot_config):
        missing = os.path.join(bot_config.temp_dir, "never_rendered.mp4")
        pipeline, parts, _ = _pipeline(bot_config, render=lambda *args: missing)
        with pytest.raises(PipelineError, match="Could not move video to output folder"):
            pipeline.run()
        assert parts["store"].uploads == []

    def test_upload_disabled(self, bot_config):
        pipeline = ShortsPipeline(
            bot_config,
            fetch_post=lambda cfg, rng: POST,
            narrator=FakeNarrator(bot_config.temp_dir),
            render=fake_render([]),
            upload=False,
        )
        assert pipeline.store is None
        result = pipeline.run()
        assert result["drive_url"] is None
        assert os.path.exists(result["local_path"])

    def test_default_collaborators(self, bot_config):
        pipeline = ShortsPipeline(bot_config)
        assert pipeline.narrator.voice_id == bot_config.elevenlabs_voice_id
        assert pipeline.store.folder_id == "folder123"

    def test_rng_shared_with_fetch(self, bot_config):
        seen = []
        rng = random.Random(11)

        def fetch(cfg, r):
            seen.append(r)
            return None

        ShortsPipeline(bot_config, fetch_post=fetch, narrator=object(),
                       render=lambda *a: None, rng=rng, upload=False).run()
        assert seen == [rng]
