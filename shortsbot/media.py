"""Vertical short rendering with burned-in captions.

Cuts a random window out of a landscape background clip, crops it to
9:16, overlays the caption drawtext chain and muxes the narration, all in
a single ffmpeg pass.
"""

import os
import random
import subprocess

from shortsbot.captions import build_caption_filter, get_caption_style
from shortsbot.common import PipelineError, ensure_dir, file_size_mb

CROP_FILTER = "crop=ih*(9/16):ih"
OUTPUT_NAME = "final_video.mp4"


def get_media_duration(path):
    """Get a media file's duration in seconds using ffprobe.

    Raises:
        PipelineError: ffprobe missing, failed, or printed no duration.
    """
    try:
        result = subprocess.run(
            ["ffprobe", "-v", "quiet", "-show_entries", "format=duration",
             "-of", "csv=p=0", path],
            capture_output=True, text=True
        )
    except FileNotFoundError:
        raise PipelineError("ffprobe not found on PATH")

    if result.returncode != 0:
        raise PipelineError(f"ffprobe failed for {path}")
    try:
        return float(result.stdout.strip())
    except ValueError:
        raise PipelineError(f"ffprobe returned no duration for {path}")


def pick_start_offset(background_duration, narration_duration, rng=None):
    """Pick a random start so the narration fits inside the background.

    Args:
        background_duration: Background clip length in seconds.
        narration_duration: Narration length in seconds.
        rng: random.Random-like source (uses ``uniform``).

    Returns:
        float: Offset in ``[0, background_duration - narration_duration]``.

    Raises:
        PipelineError: Background is shorter than the narration.
    """
    if background_duration < narration_duration:
        raise PipelineError(
            f"Background video ({background_duration:.2f}s) is shorter than "
            f"audio ({narration_duration:.2f}s)"
        )
    rng = rng or random
    return rng.uniform(0, background_duration - narration_duration)


def build_filter_chain(subtitle_filter):
    """Compose crop -> captions into a filter_complex graph ending at [final].

    With no captions the graph is crop-only.
    """
    if not subtitle_filter:
        return f"[0:v]{CROP_FILTER}[final]"
    return f"[0:v]{CROP_FILTER}[cropped];[cropped]{subtitle_filter}[final]"


def build_render_command(background_path, start_sec, duration, audio_path,
                         filter_chain, output_path):
    """Build the ffmpeg argv for one render pass."""
    return [
        "ffmpeg", "-y",
        "-ss", f"{start_sec:.3f}", "-t", f"{duration:.3f}",
        "-i", background_path,
        "-i", audio_path,
        "-filter_complex", filter_chain,
        "-map", "[final]",
        "-map", "1:a",
        "-c:v", "libx264",
        "-c:a", "aac",
        "-shortest",
        "-movflags", "+faststart",
        output_path,
    ]


def render_video(audio_path, narration_duration, text, config, rng=None):
    """Render the captioned vertical short.

    Args:
        audio_path: Narration MP3.
        narration_duration: Narration length in seconds.
        text: Narration text used for the captions.
        config: BotConfig (background clip, temp dir, caption settings).
        rng: random.Random-like source for the start offset.

    Returns:
        str: Path to the rendered MP4 in the temp directory.

    Raises:
        PipelineError: Missing background, background too short, or ffmpeg
        failure.
    """
    background = config.background_video
    if not os.path.exists(background):
        raise PipelineError(
            f"Background video not found at {background}. "
            "Set BACKGROUND_VIDEO or add assets/gameplay.mp4"
        )

    background_duration = get_media_duration(background)
    start = pick_start_offset(background_duration, narration_duration, rng)

    try:
        style = get_caption_style(config.caption_style)
    except KeyError as exc:
        raise PipelineError(str(exc))
    subtitle_filter, timed = build_caption_filter(
        text, narration_duration, style=style,
        max_words=config.max_words, max_chars=config.max_chars,
        min_fragment_seconds=config.min_fragment_seconds,
    )
    filter_chain = build_filter_chain(subtitle_filter)

    output_path = os.path.join(ensure_dir(config.temp_dir), OUTPUT_NAME)
    cmd = build_render_command(background, start, narration_duration,
                               audio_path, filter_chain, output_path)

    print(f"[Render] start={start:.2f}s, duration={narration_duration:.2f}s")
    print(f"[Render] Subtitle chunks: {len(timed)} (style: {config.caption_style})")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        raise PipelineError("ffmpeg not found on PATH")

    if result.returncode != 0 or not os.path.exists(output_path):
        tail = result.stderr[-300:] if result.stderr else "unknown error"
        raise PipelineError(f"ffmpeg render failed: {tail}")

    print(f"[Render] OK: {output_path} ({file_size_mb(output_path):.1f} MB)")
    return output_path
