"""Reddit story source.

Scans a few random story subreddits through Reddit's public JSON listings
and picks one self post that reads well as narration: no links, cleaned of
edit notes and shorthand, and inside a length band.
"""

import random
import re

import requests

from shortsbot.common import PipelineError

# Reddit blocks the default python-requests agent
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
LISTING_URL = "https://www.reddit.com/r/{subreddit}/{sort}.json?limit=25{params}"

SUBREDDITS = [
    "confessions",
    "TrueOffMyChest",
    "tifu",
    "AmItheAsshole",
    "relationship_advice",
    "pettyrevenge",
    "MaliciousCompliance",
    "entitledparents",
]

SORT_OPTIONS = [
    {"sort": "hot", "params": ""},
    {"sort": "new", "params": ""},
    {"sort": "top", "params": "&t=day"},
    {"sort": "top", "params": "&t=week"},
    {"sort": "rising", "params": ""},
]

SUBREDDITS_PER_RUN = 3
MIN_LENGTH = 600
MAX_LENGTH = 2000

ABBREVIATIONS = {
    "AITA": "Am I the asshole",
    "YTA": "You're the asshole",
    "NTA": "Not the asshole",
    "ESH": "Everyone sucks here",
    "NAH": "No assholes here",
    "TIFU": "Today I fucked up",
    "TLDR": "Too long, didn't read",
    "IMO": "In my opinion",
    "IMHO": "In my humble opinion",
    "TBH": "To be honest",
    "AFAIK": "As far as I know",
    "IIRC": "If I remember correctly",
    "SO": "significant other",
    "BF": "boyfriend",
    "GF": "girlfriend",
    "DH": "dear husband",
    "DW": "dear wife",
    "MIL": "mother in law",
    "FIL": "father in law",
    "SIL": "sister in law",
    "BIL": "brother in law",
}

_AGE_GENDER_RE = re.compile(r"\b(\d{1,2})\s*([fFmM])\b")
_EDIT_RE = re.compile(r"\b(edit|update)\s*:.*$", re.IGNORECASE | re.MULTILINE)
_URL_RE = re.compile(r"https?://[^\s]+|www\.[^\s]+", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Text cleanup
# ---------------------------------------------------------------------------

def expand_reddit_shorthand(text):
    """Expand Reddit shorthand so TTS reads it naturally.

    ``34f`` / ``(35M)`` become ``34 year old female`` / ``(35 year old
    male)``. Abbreviations (AITA, TIFU, MIL, ...) are spelled out only when
    typed in capitals, so ordinary words like "so" and "nah" survive.
    """
    def _age_gender(match):
        gender = "female" if match.group(2).lower() == "f" else "male"
        return f"{match.group(1)} year old {gender}"

    expanded = _AGE_GENDER_RE.sub(_age_gender, text)
    for abbr, full in ABBREVIATIONS.items():
        expanded = re.sub(rf"\b{abbr}\b", full, expanded)
    return expanded


def clean_content(text):
    """Expand shorthand, drop Edit:/Update: tails and collapse blank lines."""
    cleaned = expand_reddit_shorthand(text)
    cleaned = _EDIT_RE.sub("", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()


def contains_url(text):
    return bool(_URL_RE.search(text))


# ---------------------------------------------------------------------------
# Candidate scan
# ---------------------------------------------------------------------------

def iter_candidate_posts(subreddits, sort_option, session=None):
    """Yield raw post dicts from each subreddit's listing, lazily.

    A failing subreddit is logged and skipped; the scan moves on to the
    next one.
    """
    session = session or requests
    for subreddit in subreddits:
        url = LISTING_URL.format(subreddit=subreddit, sort=sort_option["sort"],
                                 params=sort_option["params"])
        try:
            resp = session.get(url, headers={"User-Agent": USER_AGENT}, timeout=30)
            resp.raise_for_status()
            children = resp.json()["data"]["children"]
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            print(f"[Reddit] Error fetching from r/{subreddit}: {exc}")
            continue

        for child in children:
            post = child.get("data", {})
            post.setdefault("subreddit", subreddit)
            yield post


def iter_valid_posts(candidates, min_length=MIN_LENGTH, max_length=MAX_LENGTH):
    """Filter raw candidates down to narratable self posts, lazily.

    Yields:
        dict: {"title", "content", "id", "subreddit"} with cleaned content.
    """
    for post in candidates:
        if not post.get("is_self"):
            continue
        raw = post.get("selftext") or ""
        if not raw or contains_url(raw):
            continue
        content = clean_content(raw)
        if not min_length <= len(content) <= max_length:
            continue
        yield {
            "title": post.get("title", ""),
            "content": content,
            "id": post.get("id"),
            "subreddit": post.get("subreddit"),
        }


def select_post(posts, rng=None):
    """Pick one post uniformly from everything *posts* yields, or None."""
    pool = list(posts)
    if not pool:
        return None
    rng = rng or random
    return rng.choice(pool)


def get_reddit_post(config=None, rng=None, session=None):
    """Find a random suitable Reddit story.

    Args:
        config: Optional BotConfig (subreddit pool and length band).
        rng: random.Random-like source (``sample``, ``choice``).
        session: requests-compatible object with ``get``.

    Returns:
        dict | None: {"title", "content", "id", "subreddit"}, or None when
        no post qualified.
    """
    rng = rng or random.Random()
    pool = (config.subreddits if config and config.subreddits else SUBREDDITS)
    min_length = config.min_length if config else MIN_LENGTH
    max_length = config.max_length if config else MAX_LENGTH
    if min_length > max_length:
        raise PipelineError(f"min_length {min_length} exceeds max_length {max_length}")

    chosen = rng.sample(pool, min(SUBREDDITS_PER_RUN, len(pool)))
    sort_option = rng.choice(SORT_OPTIONS)
    print(f"[Reddit] Searching: r/{', r/'.join(chosen)} ({sort_option['sort']})")

    candidates = iter_candidate_posts(chosen, sort_option, session=session)
    valid = list(iter_valid_posts(candidates, min_length, max_length))
    post = select_post(valid, rng)

    if post is None:
        print("[Reddit] No suitable posts found matching criteria.")
        return None

    print(f"[Reddit] Found {len(valid)} valid posts, selected from r/{post['subreddit']}")
    return post
