"""Caption engine for vertical shorts.

Splits narration into short on-screen fragments, gives each fragment a
time window proportional to its length, and renders the fragments as an
ffmpeg ``drawtext`` filter chain that is burned in during the single
render pass in ``shortsbot.media``.

Timing is estimated from character counts, not transcribed: the only
measured input is the total narration duration from ffprobe.
"""

import os


# ---------------------------------------------------------------------------
# Caption style presets
# ---------------------------------------------------------------------------

CAPTION_STYLES = {
    # Large white text with a hard black outline and drop shadow, upper-middle
    "classic": {
        "font_file": None,
        "font_size": 18,
        "font_color": "white",
        "border_width": 3,
        "border_color": "black",
        "x": "(w-text_w)/2",
        "y": "h*0.40",
        "shadow": {"color": "black", "x": 2, "y": 2},
    },
    # Smaller yellow subtitle in the lower third
    "yellow": {
        "font_file": None,
        "font_size": 14,
        "font_color": "yellow",
        "border_width": 2,
        "border_color": "black",
        "x": "(w-text_w)/2",
        "y": "h*0.70",
        "shadow": None,
    },
}

FONT_CANDIDATES = [
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]


def find_font_file():
    """Return the first bold system font that exists, or None.

    With None the drawtext filter falls back to fontconfig's default font.
    """
    for path in FONT_CANDIDATES:
        if os.path.exists(path):
            return path
    return None


def get_caption_style(name="classic", font_file=None):
    """Resolve a caption style preset by name.

    Args:
        name: Key in CAPTION_STYLES.
        font_file: Font to force.  When omitted a system font is looked up
            with find_font_file().

    Returns:
        dict: A copy of the preset with ``font_file`` filled in.

    Raises:
        KeyError: Unknown style name.
    """
    if name not in CAPTION_STYLES:
        raise KeyError(
            f"Unknown caption style {name!r} "
            f"(available: {', '.join(sorted(CAPTION_STYLES))})"
        )
    style = dict(CAPTION_STYLES[name])
    if style.get("shadow"):
        style["shadow"] = dict(style["shadow"])
    style["font_file"] = font_file or style.get("font_file") or find_font_file()
    return style


# ---------------------------------------------------------------------------
# 1. Text chunking
# ---------------------------------------------------------------------------

def chunk_text(text, max_words=3, max_chars=25):
    """Split narration into display-friendly fragments.

    Words are accumulated greedily.  A new fragment starts when the current
    one already holds ``max_words`` words, or when adding the next word
    (joined by single spaces) would push it past ``max_chars``.  A word
    longer than ``max_chars`` on its own still gets its own fragment.

    Args:
        text: Full narration text.
        max_words: Maximum words per fragment.
        max_chars: Maximum characters per fragment.

    Returns:
        list[dict]: Fragments in reading order, each with "text" and
        "char_count".  Empty text gives an empty list.
    """
    words = text.split()
    fragments = []
    current = []
    current_len = 0

    for word in words:
        would_be = current_len + len(word) + (1 if current else 0)
        if current and (len(current) >= max_words or would_be > max_chars):
            fragments.append(_make_fragment(current))
            current = [word]
            current_len = len(word)
        else:
            current.append(word)
            current_len = would_be

    if current:
        fragments.append(_make_fragment(current))

    return fragments


def _make_fragment(words):
    joined = " ".join(words)
    return {"text": joined, "char_count": len(joined)}


# ---------------------------------------------------------------------------
# 2. Timing allocation
# ---------------------------------------------------------------------------

def allocate_timings(fragments, total_duration, min_fragment_seconds=0.5):
    """Give each fragment a caption window across the narration.

    Each fragment gets ``max(weight * total_duration, min_fragment_seconds)``
    seconds, where weight is its share of all characters.  Because the
    floor can push the sum past ``total_duration``, every window is then
    rescaled so the last one ends exactly at ``total_duration``.

    The floor is applied before rescaling, so with many short fragments the
    short ones end up with more than their proportional share.  Tune it
    with ``min_fragment_seconds``.

    Args:
        fragments: Output of chunk_text.
        total_duration: Narration length in seconds (> 0).
        min_fragment_seconds: Readability floor per fragment (> 0).

    Returns:
        list[dict]: One timed fragment per input fragment with "text",
        "char_count", "start_sec" and "end_sec".  Windows are contiguous,
        start at 0 and end at total_duration.

    Raises:
        ValueError: total_duration or min_fragment_seconds not positive.
    """
    if total_duration <= 0:
        raise ValueError(f"total_duration must be positive, got {total_duration}")
    if min_fragment_seconds <= 0:
        raise ValueError(
            f"min_fragment_seconds must be positive, got {min_fragment_seconds}")

    total_chars = sum(f["char_count"] for f in fragments)
    if total_chars == 0:
        return []

    timed = []
    cursor = 0.0
    for fragment in fragments:
        weight = fragment["char_count"] / total_chars
        duration = max(weight * total_duration, min_fragment_seconds)
        start = cursor
        cursor += duration
        timed.append({
            "text": fragment["text"],
            "char_count": fragment["char_count"],
            "start_sec": start,
            "end_sec": cursor,
        })

    if cursor > 0:
        scale = total_duration / cursor
        for t in timed:
            t["start_sec"] *= scale
            t["end_sec"] *= scale
        # pin the tail so float drift never leaves a gap at the end
        timed[-1]["end_sec"] = float(total_duration)

    return timed


# ---------------------------------------------------------------------------
# 3. drawtext filter emission
# ---------------------------------------------------------------------------

def escape_drawtext(text):
    """Escape text for a single-quoted ffmpeg drawtext ``text=`` value.

    Apostrophes cannot be escaped inside the quoted value, so they are
    swapped for a typographic right quote instead.
    """
    return (
        text.replace("\\", "\\\\\\\\")
        .replace("'", "\u2019")
        .replace(":", "\\:")
        .replace("[", "\\[")
        .replace("]", "\\]")
        .replace("%", "\\%")
        .replace(";", "\\;")
    )


def _escape_option_value(value):
    """Escape a plain option value such as a font path."""
    return str(value).replace("\\", "/").replace(":", "\\:")


def build_drawtext_filter(text, start_sec, end_sec, style):
    """Build one drawtext directive shown during ``[start_sec, end_sec]``.

    Args:
        text: Raw fragment text (escaped here).
        start_sec: Window start in seconds.
        end_sec: Window end in seconds.
        style: Caption style dict (see CAPTION_STYLES).

    Returns:
        str: ``drawtext=...`` directive.
    """
    options = [f"text='{escape_drawtext(text)}'"]
    if style.get("font_file"):
        options.append(f"fontfile={_escape_option_value(style['font_file'])}")
    options.extend([
        f"fontsize={style['font_size']}",
        f"fontcolor={style['font_color']}",
        f"borderw={style['border_width']}",
        f"bordercolor={style['border_color']}",
    ])
    shadow = style.get("shadow")
    if shadow:
        options.extend([
            f"shadowcolor={shadow['color']}",
            f"shadowx={shadow['x']}",
            f"shadowy={shadow['y']}",
        ])
    options.extend([
        f"x={style['x']}",
        f"y={style['y']}",
        f"enable='between(t,{start_sec:.3f},{end_sec:.3f})'",
    ])
    return "drawtext=" + ":".join(options)


def generate_subtitle_filter(timed_fragments, style):
    """Join one drawtext directive per timed fragment into a filter chain.

    Returns:
        str: Comma-separated directives in fragment order, or "" when there
        are no fragments.
    """
    return ",".join(
        build_drawtext_filter(t["text"], t["start_sec"], t["end_sec"], style)
        for t in timed_fragments
    )


def build_caption_filter(text, duration, style=None, max_words=3, max_chars=25,
                         min_fragment_seconds=0.5):
    """Chunk, time and render captions for *text* in one call.

    Returns:
        tuple: (filter_expression, timed_fragments)
    """
    if style is None:
        style = get_caption_style("classic")
    fragments = chunk_text(text, max_words=max_words, max_chars=max_chars)
    timed = allocate_timings(fragments, duration, min_fragment_seconds)
    return generate_subtitle_filter(timed, style), timed
