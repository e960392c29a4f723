"""
Verse key parsing: "2:255" for a single ayah, "18:38-42" for a range.
"""
import re

from .chapters import is_valid_chapter
from .types import VerseRange

_RANGE_KEY = re.compile(r'^\s*(\d+):(\d+)(?:-(\d+))?\s*$')


class InvalidVerseKey(ValueError):
    pass


def parse_verse_key(verse_key):
    """Split "chapter:verse" into two ints, or None if it isn't one."""
    parts = str(verse_key).split(":")
    if len(parts) != 2:
        return None
    try:
        chapter, verse = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not is_valid_chapter(chapter) or verse < 1:
        return None
    return chapter, verse


def parse_verse_range_key(key: str) -> VerseRange:
    m = _RANGE_KEY.match(key or "")
    if not m:
        raise InvalidVerseKey(f"Malformed verse key: {key!r}")

    chapter = int(m.group(1))
    if not is_valid_chapter(chapter):
        raise InvalidVerseKey(f"Invalid chapter number: {chapter}")

    start = int(m.group(2))
    end = int(m.group(3)) if m.group(3) else start
    if start < 1 or end < start:
        raise InvalidVerseKey(f"Invalid verse numbers: {key!r}")

    return VerseRange(chapter, start, end)
