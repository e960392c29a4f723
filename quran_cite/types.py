from dataclasses import dataclass, field
from typing import List


@dataclass
class Word:
    """One token of a search hit, as returned by the verse-search API."""
    char_type: str
    text: str = ""
    highlighted: bool = False

    @property
    def is_word(self) -> bool:
        return self.char_type == "word"


@dataclass
class SearchHit:
    verse_key: str
    text: str = ""
    words: List[Word] = field(default_factory=list)


@dataclass
class MatchAnalysis:
    confidence: float
    verse_word_count: int
    highlighted_count: int
    longest_consecutive_run: int


@dataclass
class ConfidentMatch:
    verse_key: str
    confidence: float


@dataclass(frozen=True)
class VerseRange:
    chapter: int
    start_verse: int
    end_verse: int

    @property
    def verse_key(self) -> str:
        if self.start_verse == self.end_verse:
            return f"{self.chapter}:{self.start_verse}"
        return f"{self.chapter}:{self.start_verse}-{self.end_verse}"


@dataclass
class VerseReference:
    """A citation ready for display, e.g. "Al-Kahf 18:10-11"."""
    reference: str
    verse_key: str
    confidence: float
    longest_consecutive_run: int

    def to_dict(self):
        return {
            "reference": self.reference,
            "verseKey": self.verse_key,
            "confidence": round(self.confidence, 4),
            "longestConsecutiveRun": self.longest_consecutive_run,
        }


@dataclass
class VerseText:
    verse_key: str
    verse_number: int
    arabic_text: str
    translation: str


@dataclass
class VerseDetails:
    chapter: int
    chapter_name: str
    chapter_name_arabic: str
    verses: List[VerseText]
    start_verse: int
    end_verse: int
    total_verses: int
    revelation_place: str

    def to_dict(self):
        return {
            "chapter": self.chapter,
            "chapterName": self.chapter_name,
            "chapterNameArabic": self.chapter_name_arabic,
            "verses": [
                {
                    "verseKey": v.verse_key, "verseNumber": v.verse_number,
                    "arabicText": v.arabic_text, "translation": v.translation,
                }
                for v in self.verses
            ],
            "startVerse": self.start_verse,
            "endVerse": self.end_verse,
            "totalVerses": self.total_verses,
            "revelationPlace": self.revelation_place,
        }
