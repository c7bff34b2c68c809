"""Bounded-window proximity matching.

A keyword anchors a search for a percentage that must appear within a fixed
number of characters after it. This is a heuristic, not a parser: window sizes
are the tuning knobs and are kept here as named constants.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

# Max characters between the anchor keyword and the percentage.
TRAILING_WINDOW = 160
# Max characters between the "65-74" age token and "transportation".
AGE_BAND_LEAD_WINDOW = 160
# Max characters between "transportation" and the age-band percentage.
AGE_BAND_TRAILING_WINDOW = 80
SNIPPET_MAX_CHARS = 280

_PERCENT = r"(\d{1,2}(?:\.\d+)?)%"
_AGE_BAND_RE = re.compile(
    rf"65\s*[-‐–—]\s*74[\s\S]{{0,{AGE_BAND_LEAD_WINDOW}}}transportation"
    rf"[\s\S]{{0,{AGE_BAND_TRAILING_WINDOW}}}?{_PERCENT}",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class WindowMatch:
    value: float
    snippet: str
    start: int
    end: int


def normalize_snippet(text: str, limit: int = SNIPPET_MAX_CHARS) -> str:
    return " ".join(text[:limit].split())


@lru_cache(maxsize=64)
def _keyword_re(keyword: str) -> re.Pattern[str]:
    return re.compile(
        rf"{re.escape(keyword)}[\s\S]{{0,{TRAILING_WINDOW}}}?{_PERCENT}",
        re.IGNORECASE,
    )


def _to_match(m: re.Match[str] | None) -> WindowMatch | None:
    if not m:
        return None
    try:
        value = float(m.group(1))
    except ValueError:
        return None
    return WindowMatch(value=value, snippet=normalize_snippet(m.group(0)), start=m.start(), end=m.end())


def find_percent_near(text: str, keyword: str) -> WindowMatch | None:
    """First percentage within TRAILING_WINDOW chars after `keyword`, in reading order."""

    if not text or not keyword:
        return None
    return _to_match(_keyword_re(keyword).search(text))


def find_age_band_percent(text: str) -> WindowMatch | None:
    """Percentage tied to the 65-74 age band via a nearby "transportation" mention."""

    if not text:
        return None
    return _to_match(_AGE_BAND_RE.search(text))
