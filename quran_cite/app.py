#!/usr/bin/env python3
"""
📖 Quran Cite: HTTP API
Send an Arabic transcript fragment → get the surah:ayah it recites, if any.
"""
import logging

import httpx
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from . import search
from .chapters import get_chapter_name
from .core import find_verse_reference, format_reference
from .verse_keys import InvalidVerseKey

log = logging.getLogger(__name__)


class MatchRequest(BaseModel):
    text: str


app = FastAPI(title="Quran Cite", description="Verse citations for live Arabic transcripts")


@app.post("/match")
async def match_endpoint(req: MatchRequest):
    """Identify the verse(s) a transcript fragment recites"""
    ref = await find_verse_reference(req.text)
    return {"text": req.text, "verse_reference": format_reference(ref)}


@app.get("/verse")
async def verse_endpoint(key: str, lang: str = "en"):
    """Chapter text + translation around a verse key such as 18:38-42"""
    try:
        details = await search.fetch_verse_details(key, lang)
    except InvalidVerseKey as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (httpx.HTTPError, ValueError) as e:
        log.warning("Error fetching verse %s: %s", key, e)
        raise HTTPException(status_code=502, detail="Failed to fetch verse data")
    return details.to_dict()


@app.get("/chapters/{chapter}")
async def chapter_endpoint(chapter: int):
    return {"chapter": chapter, "name": get_chapter_name(chapter)}


# Health check
@app.get("/health")
async def health():
    return {"status": "ok", "search_api": search.SEARCH_API_URL}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    print("📖 Quran Cite: starting API")
    print(f"   Search API: {search.SEARCH_API_URL}")
    uvicorn.run(app, host="0.0.0.0", port=7860)
