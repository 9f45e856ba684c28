"""End-to-end run: Reddit story -> narration -> captioned short -> Drive."""

import os
import random
import shutil

from shortsbot.common import PipelineError, ensure_dir
from shortsbot.drive import DriveUploader
from shortsbot.media import render_video
from shortsbot.reddit import get_reddit_post
from shortsbot.voice import ElevenLabsClient


def _step(number, title):
    print(f"\n[Bot] Step {number}: {title}")


class ShortsPipeline:
    """Runs one bot pass with swappable collaborators.

    Args:
        config: BotConfig.
        fetch_post: callable(config, rng) -> post dict or None.
        narrator: object with ``generate_audio(text)`` -> {"path", "duration"}.
        render: callable(audio_path, duration, text, config, rng) -> video path.
        store: object with ``upload(path, name)`` -> link.
        rng: random.Random-like source shared by post selection and the
            background offset.
        upload: False skips publishing when no store is given.
    """

    def __init__(self, config, fetch_post=None, narrator=None, render=None,
                 store=None, rng=None, upload=True):
        self.config = config
        self.rng = rng or random.Random()
        self.fetch_post = fetch_post or (lambda cfg, rng: get_reddit_post(cfg, rng=rng))
        self.narrator = narrator or ElevenLabsClient.from_config(config)
        self.render = render or render_video
        if store is None and upload:
            store = DriveUploader.from_config(config)
        self.store = store

    def run(self):
        """Produce and publish one short.

        Returns:
            dict | None: {"post_id", "local_path", "drive_url"}, or None when
            no suitable post was found.  drive_url is None when uploading is
            disabled.

        Raises:
            PipelineError: Any stage failed; nothing is retried.
        """
        print("=" * 50)
        print("  Shorts Bot")
        print("=" * 50)

        _step(1, "Fetching Reddit post...")
        post = self.fetch_post(self.config, self.rng)
        if not post:
            print("[Bot] No suitable post found. Exiting.")
            return None
        print(f"[Bot] Post found: {post['title']}")
        print(f"[Bot]   ID: {post['id']}")
        print(f"[Bot]   Content length: {len(post['content'])} characters")

        _step(2, "Generating audio...")
        narration = self.narrator.generate_audio(post["content"])
        print(f"[Bot] Audio: {narration['path']} ({narration['duration']:.2f}s)")

        _step(3, "Processing video...")
        temp_video = self.render(narration["path"], narration["duration"],
                                 post["content"], self.config, self.rng)

        _step(4, "Moving to output folder...")
        filename = f"{post['id']}.mp4"
        try:
            final_path = os.path.join(ensure_dir(self.config.output_dir), filename)
            shutil.move(temp_video, final_path)
        except OSError as exc:
            raise PipelineError(f"Could not move video to output folder: {exc}")
        print(f"[Bot] Final video saved: {final_path}")

        drive_url = None
        if self.store is not None:
            _step(5, "Uploading to Google Drive...")
            drive_url = self.store.upload(final_path, filename)

        print("\n" + "=" * 50)
        print("[Bot] Completed successfully!")
        print(f"[Bot] Local: {final_path}")
        if drive_url:
            print(f"[Bot] Drive: {drive_url}")

        return {"post_id": post["id"], "local_path": final_path, "drive_url": drive_url}
