import re
from typing import Iterable, List

BULLET = "•"

_BULLET_GLYPHS = re.compile(r"[•◦▪▫‣⁃][ \t]*")
_DASH_MARKER = re.compile(r"^[ \t]*[-–—][ \t]*", re.MULTILINE)
_STAR_MARKER = re.compile(r"^[ \t]*\*[ \t]*", re.MULTILINE)
# "2.5 years" is a decimal, not a list marker
_NUMBER_MARKER = re.compile(r"^[ \t]*(\d+)\.(?!\d)[ \t]*", re.MULTILINE)
_INLINE_SPACE = re.compile(r"[ \t]+")
_TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")
_EDGE_NON_WORD = re.compile(r"^\W+|\W+$")


def normalize_resume_text(text: str) -> str:
    """
    Canonicalise list markers and whitespace before segmentation.

    Every bullet style becomes "• ", numbered markers keep their number
    followed by one space, and blank-line runs shrink to a single blank
    line. Line breaks are kept since they carry the document structure.
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _BULLET_GLYPHS.sub(f"{BULLET} ", text)
    text = _DASH_MARKER.sub(f"{BULLET} ", text)
    text = _STAR_MARKER.sub(f"{BULLET} ", text)
    text = _NUMBER_MARKER.sub(r"\1. ", text)
    text = _INLINE_SPACE.sub(" ", text)
    text = _TRAILING_SPACE.sub("", text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text


def non_blank_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def clean_fragment(fragment: str) -> str:
    """Trim a split fragment and drop enclosing brackets and edge punctuation."""
    cleaned = fragment.strip().strip("()[]").strip()
    return _EDGE_NON_WORD.sub("", cleaned)


def unique_in_order(items: Iterable[str]) -> List[str]:
    # exact-string dedup: "React" and "react" are different entries
    return list(dict.fromkeys(item for item in items if item))
