"""Quran verse citations for live Arabic transcripts."""
from .chapters import CHAPTER_NAMES, get_chapter_name
from .core import analyze_match, count_arabic_words, find_verse_range, find_verse_reference
from .types import SearchHit, VerseRange, VerseReference, Word

__version__ = "0.1.0"
