"""
quran.com API client: full-text verse search and verse details.
"""
import logging
import os
import re
from contextlib import nullcontext

import httpx

from .chapters import get_chapter_name
from .types import SearchHit, VerseDetails, VerseText, Word
from .verse_keys import parse_verse_range_key

log = logging.getLogger(__name__)

# ── Config ──────────────────────────────────────────
SEARCH_API_URL = os.environ.get("QURAN_SEARCH_URL", "https://api.quran.com/api/v4").rstrip("/")
SEARCH_PAGE_SIZE = 10
TIMEOUT = 5

TRANSLATION_IDS = {
    "en": 20,   # Saheeh International
    "ur": 97,   # Tafheem
    "fr": 136,  # Montada
    "es": 140,  # Montada
    "de": 27,   # Frank Bubenheim
    "tr": 77,   # Diyanet
    "id": 33,
    "bn": 161,  # Taisirul
    "hi": 122,
    "ar": 20,
}

_HEADERS = {"Accept": "application/json"}
_FOOTNOTES = re.compile(r'<sup[^>]*>.*?</sup>', re.IGNORECASE | re.DOTALL)
_TAGS = re.compile(r'<[^>]*>')


def _client(client):
    """Borrow the caller's client, or open a short-lived one."""
    if client is not None:
        return nullcontext(client)
    return httpx.AsyncClient(timeout=TIMEOUT)


# ── Search ──────────────────────────────────────────

def _parse_hit(raw):
    words = [
        Word(
            char_type=w.get('char_type', ''),
            text=w.get('text', ''),
            highlighted=w.get('highlight') is True,
        )
        for w in raw.get('words') or []
    ]
    return SearchHit(verse_key=raw['verse_key'], text=raw.get('text', ''), words=words)


def parse_search_results(data):
    """Map a /search JSON body to SearchHits, keeping the API's ranking."""
    results = ((data or {}).get('search') or {}).get('results') or []
    hits = []
    for raw in results[:SEARCH_PAGE_SIZE]:
        if not isinstance(raw, dict) or not raw.get('verse_key'):
            continue
        hits.append(_parse_hit(raw))
    return hits


async def search_verses(query: str, *, client=None, base_url=None):
    """Full-text search. Any failure comes back as an empty result list."""
    url = f"{base_url or SEARCH_API_URL}/search"
    params = {"q": query, "size": str(SEARCH_PAGE_SIZE), "page": "1"}
    try:
        async with _client(client) as http:
            r = await http.get(url, params=params, headers=_HEADERS)
        if not r.is_success:
            log.warning("Quran search failed: %s", r.status_code)
            return []
        return parse_search_results(r.json())
    except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
        log.warning("Quran search error: %s", e)
        return []


# ── Verse details ───────────────────────────────────

def clean_translation(text: str) -> str:
    text = _FOOTNOTES.sub('', text or '')
    return _TAGS.sub('', text).strip()


async def _get_json(http, url, params=None):
    r = await http.get(url, params=params, headers=_HEADERS)
    if not r.is_success:
        log.warning("GET %s failed: %s", url, r.status_code)
        return {}
    return r.json()


async def fetch_verse_details(key: str, lang="en", *, client=None, base_url=None) -> VerseDetails:
    """Whole chapter text + translation for a verse key like "18:38-42".

    The requested verse(s) are returned as start/end so a reader can scroll
    to them; the chapter's other verses come along for context.
    """
    verse_range = parse_verse_range_key(key)
    chapter = verse_range.chapter
    base = base_url or SEARCH_API_URL
    translation_id = TRANSLATION_IDS.get(lang, TRANSLATION_IDS["en"])

    async with _client(client) as http:
        chapter_data = (await _get_json(
            http, f"{base}/chapters/{chapter}", {"language": "en"}
        )).get('chapter') or {}
        total_verses = chapter_data.get('verses_count') or 0

        verses_data = await _get_json(
            http, f"{base}/verses/by_chapter/{chapter}",
            {"fields": "text_uthmani", "per_page": str(max(total_verses, 300))},
        )
        translations_data = await _get_json(
            http, f"{base}/quran/translations/{translation_id}",
            {"chapter_number": str(chapter)},
        )

    fetched_verses = verses_data.get('verses') or []
    translations = translations_data.get('translations') or []

    verses = []
    for i, v in enumerate(fetched_verses):
        translation = translations[i].get('text', '') if i < len(translations) else ''
        verses.append(VerseText(
            verse_key=v.get('verse_key', ''),
            verse_number=v.get('verse_number', i + 1),
            arabic_text=v.get('text_uthmani') or '',
            translation=clean_translation(translation),
        ))

    return VerseDetails(
        chapter=chapter,
        chapter_name=get_chapter_name(chapter),
        chapter_name_arabic=chapter_data.get('name_arabic', ''),
        verses=verses,
        start_verse=verse_range.start_verse,
        end_verse=verse_range.end_verse,
        total_verses=total_verses,
        revelation_place=chapter_data.get('revelation_place', ''),
    )
