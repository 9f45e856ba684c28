#!/usr/bin/env python3
"""
tiktok_bot.py - Reddit story -> narrated vertical short with burned-in captions

Picks a Reddit story, narrates it with ElevenLabs, cuts a random 9:16
window out of a gameplay clip with timed captions, and uploads the result
to Google Drive.

Usage:
    python tiktok_bot.py run
    python tiktok_bot.py run --no-upload
    python tiktok_bot.py fetch
    python tiktok_bot.py audio "Text to narrate"
    python tiktok_bot.py captions "Hello world this is a test" --duration 9
    python tiktok_bot.py upload output/abc123.mp4

Settings are read from .env (see .env.example).
"""

import argparse
import sys
import textwrap

from shortsbot.captions import CAPTION_STYLES, build_caption_filter, get_caption_style
from shortsbot.common import PipelineError
from shortsbot.config import load_config
from shortsbot.drive import DriveUploader
from shortsbot.pipeline import ShortsPipeline
from shortsbot.reddit import get_reddit_post
from shortsbot.voice import ElevenLabsClient


def build_parser():
    parser = argparse.ArgumentParser(
        prog="tiktok_bot",
        description="Reddit story shorts bot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
        Examples:
            %(prog)s run
            %(prog)s fetch
            %(prog)s captions "Hello world this is a test" --duration 9 --style yellow
        """),
    )
    parser.add_argument("--env", help="Path to .env file (default: project .env)")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    p_run = sub.add_parser("run", help="Full run: fetch -> audio -> video -> upload")
    p_run.add_argument("--no-upload", action="store_true", help="Keep the video local")

    sub.add_parser("fetch", help="Fetch and print a suitable Reddit post")

    p_audio = sub.add_parser("audio", help="Generate narration for TEXT")
    p_audio.add_argument("text", help="Text to narrate")

    p_caps = sub.add_parser("captions", help="Print caption timings and the drawtext filter")
    p_caps.add_argument("text", help="Narration text")
    p_caps.add_argument("--duration", type=float, required=True, help="Narration length (seconds)")
    p_caps.add_argument("--style", choices=sorted(CAPTION_STYLES), help="Caption style preset")

    p_up = sub.add_parser("upload", help="Upload an existing video to Drive")
    p_up.add_argument("path", help="Video file")
    p_up.add_argument("--name", help="Name in Drive (default: file name)")

    return parser


def run_command(args, config):
    """Dispatch one CLI command. Returns the process exit status."""
    if args.command == "run":
        # "no suitable post" is a clean exit, not a failure
        ShortsPipeline(config, upload=not args.no_upload).run()
        return 0

    if args.command == "fetch":
        post = get_reddit_post(config)
        if not post:
            return 0
        print(f"\nTitle: {post['title']}")
        print(f"ID: {post['id']} (r/{post['subreddit']})")
        print(f"Content length: {len(post['content'])}")
        print(f"Content preview: {post['content'][:200]}...")
        return 0

    if args.command == "audio":
        narration = ElevenLabsClient.from_config(config).generate_audio(args.text)
        print(f"\n[SUCCESS] Audio: {narration['path']} ({narration['duration']:.2f}s)")
        return 0

    if args.command == "captions":
        if args.duration <= 0:
            print("[ERROR] --duration must be positive", file=sys.stderr)
            return 2
        try:
            style = get_caption_style(args.style or config.caption_style)
        except KeyError as exc:
            raise PipelineError(exc.args[0])
        expression, timed = build_caption_filter(
            args.text, args.duration, style=style,
            max_words=config.max_words, max_chars=config.max_chars,
            min_fragment_seconds=config.min_fragment_seconds,
        )
        print(f"{'Start':>8} {'End':>8}  Text")
        print(f"{'-'*8} {'-'*8}  {'-'*30}")
        for t in timed:
            print(f"{t['start_sec']:8.3f} {t['end_sec']:8.3f}  {t['text']}")
        print(f"\n{expression}")
        return 0

    if args.command == "upload":
        link = DriveUploader.from_config(config).upload(args.path, args.name)
        print(f"\n[SUCCESS] Shareable URL: {link}")
        return 0

    return 1


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = load_config(args.env)
        return run_command(args, config)
    except PipelineError as exc:
        print(f"\n[ERROR] Bot encountered an error:\n    {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
