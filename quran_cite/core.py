"""
Verse-reference matcher: decides whether a live Arabic transcript fragment
is Quran recitation and, if so, which surah and ayah range it is.

Thresholds are conservative: a missed citation is acceptable, a wrong one
is not.
"""
import logging
import re
from collections import defaultdict

from . import search
from .chapters import get_chapter_name
from .types import ConfidentMatch, MatchAnalysis, VerseRange, VerseReference
from .verse_keys import parse_verse_key

log = logging.getLogger(__name__)

# ── Thresholds ──────────────────────────────────────
MIN_INPUT_CHARS = 8
MIN_INPUT_WORDS = 2
HIT_CONFIDENCE_FLOOR = 0.35
REFERENCE_CONFIDENCE_FLOOR = 0.45

# Bismillah opens every surah and most speeches, so it never identifies one.
EXCLUDED_VERSE_KEY = "1:1"

_ARABIC = re.compile(r'[\u0600-\u06FF]')


# ── Tokenizer ───────────────────────────────────────

def count_arabic_words(text: str) -> int:
    return sum(1 for w in (text or '').split() if _ARABIC.search(w))


# ── Match analysis ──────────────────────────────────

def _longest_run(words):
    longest = current = 0
    for w in words:
        if w.highlighted:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def analyze_match(hit, input_word_count: int, is_top_result=False) -> MatchAnalysis:
    """Score one search hit against the spoken fragment.

    Confidence comes from how much of the verse is highlighted, tiered by
    verse length, then boosted for long consecutive highlight runs and for
    being the search engine's first result.
    """
    if not hit.words:
        return MatchAnalysis(0.0, 0, 0, 0)

    words = [w for w in hit.words if w.is_word]
    verse_word_count = len(words)
    highlighted_count = sum(1 for w in words if w.highlighted)

    if highlighted_count == 0:
        return MatchAnalysis(0.0, verse_word_count, 0, 0)

    run = _longest_run(words)
    verse_ratio = highlighted_count / verse_word_count
    input_ratio = highlighted_count / input_word_count if input_word_count > 0 else 0.0

    # Scattered single-word overlaps are what common religious phrases produce.
    has_run = run >= 2
    has_density = highlighted_count >= 3 and input_ratio >= 0.5
    if not has_run and not has_density:
        return MatchAnalysis(0.0, verse_word_count, highlighted_count, run)

    confidence = 0.0
    if verse_word_count <= 5:
        if verse_ratio >= 0.5 and highlighted_count >= 2:
            confidence = verse_ratio * 0.9
    elif verse_word_count <= 15:
        if verse_ratio >= 0.35 and highlighted_count >= 3:
            confidence = verse_ratio
            if run >= 3:
                confidence *= 1.15
    else:
        if highlighted_count >= 4 and verse_ratio >= 0.2:
            confidence = verse_ratio * 1.2
            if run >= 3:
                confidence *= 1.1

    if run >= 4:
        confidence = min(confidence * 1.15, 1.0)
    if run >= 5:
        confidence = min(confidence * 1.1, 1.0)
    if is_top_result and confidence > 0:
        confidence = min(confidence * 1.2, 1.0)

    confidence = max(0.0, min(confidence, 1.0))
    return MatchAnalysis(confidence, verse_word_count, highlighted_count, run)


# ── Range aggregation ───────────────────────────────

def find_verse_range(confident_matches):
    """Longest run of consecutive ayahs in the surah with the most matches."""
    by_chapter = defaultdict(list)
    for m in confident_matches:
        parsed = parse_verse_key(m.verse_key)
        if parsed is None:
            continue
        chapter, verse = parsed
        by_chapter[chapter].append(verse)

    best_chapter, best_verses = 0, []
    for chapter, verses in by_chapter.items():
        if len(verses) > len(best_verses):
            best_chapter, best_verses = chapter, verses

    if not best_verses:
        return None

    verses = sorted(best_verses)
    start = end = cur_start = cur_end = verses[0]
    for v in verses[1:]:
        if v == cur_end + 1:
            cur_end = v
            continue
        if cur_end - cur_start > end - start:
            start, end = cur_start, cur_end
        cur_start = cur_end = v
    if cur_end - cur_start > end - start:
        start, end = cur_start, cur_end

    return VerseRange(best_chapter, start, end)


# ── Full pipeline ───────────────────────────────────

def _score_hits(hits, input_word_count):
    confident = []
    best_confidence, best_run = 0.0, 0
    for i, hit in enumerate(hits):
        if hit.verse_key == EXCLUDED_VERSE_KEY:
            continue
        analysis = analyze_match(hit, input_word_count, is_top_result=(i == 0))
        if analysis.confidence >= HIT_CONFIDENCE_FLOOR:
            confident.append(ConfidentMatch(hit.verse_key, analysis.confidence))
        if analysis.confidence > best_confidence:
            best_confidence = analysis.confidence
            best_run = analysis.longest_consecutive_run
    return confident, best_confidence, best_run


async def find_verse_reference(arabic_text, *, client=None, base_url=None):
    """Return a VerseReference for a recited fragment, or None.

    None covers every non-citation outcome alike: too little text, search
    unavailable, no hit confident enough.
    """
    text = (arabic_text or '').strip()
    input_word_count = count_arabic_words(text)
    if len(text) < MIN_INPUT_CHARS or input_word_count < MIN_INPUT_WORDS:
        return None

    try:
        hits = await search.search_verses(text, client=client, base_url=base_url)
        if not hits:
            return None
        confident, best_confidence, best_run = _score_hits(hits, input_word_count)
    except Exception:
        log.exception("Error finding verse reference")
        return None

    if best_confidence < REFERENCE_CONFIDENCE_FLOOR:
        log.debug("No citation: best confidence %.3f", best_confidence)
        return None

    verse_range = find_verse_range(confident)
    if verse_range is None:
        return None
    if verse_range == VerseRange(1, 1, 1):
        return None

    verse_key = verse_range.verse_key
    ref = VerseReference(
        reference=f"{get_chapter_name(verse_range.chapter)} {verse_key}",
        verse_key=verse_key,
        confidence=best_confidence,
        longest_consecutive_run=best_run,
    )
    log.debug("Citation %s (confidence %.3f)", ref.reference, ref.confidence)
    return ref


def format_reference(ref):
    return ref.to_dict() if ref is not None else None
