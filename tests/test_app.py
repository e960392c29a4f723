import httpx
import pytest
from fastapi.testclient import TestClient

from quran_cite import app as app_module
from quran_cite import search
from quran_cite.types import VerseDetails, VerseReference, VerseText


@pytest.fixture
def client():
    return TestClient(app_module.app)


def _fake_find(result):
    async def find(text):
        return result
    return find


def test_match_returns_citation(client, monkeypatch):
    ref = VerseReference("Al-Kahf 18:10-11", "18:10-11", 0.97, 8)
    monkeypatch.setattr(app_module, "find_verse_reference", _fake_find(ref))

    r = client.post("/match", json={"text": "ربنا آتنا من لدنك رحمة"})

    assert r.status_code == 200
    assert r.json() == {
        "text": "ربنا آتنا من لدنك رحمة",
        "verse_reference": {
            "reference": "Al-Kahf 18:10-11",
            "verseKey": "18:10-11",
            "confidence": 0.97,
            "longestConsecutiveRun": 8,
        },
    }


def test_match_without_citation(client, monkeypatch):
    monkeypatch.setattr(app_module, "find_verse_reference", _fake_find(None))
    r = client.post("/match", json={"text": "السلام عليكم ورحمة الله"})
    assert r.status_code == 200
    assert r.json()["verse_reference"] is None


def test_match_short_text_needs_no_network(client):
    r = client.post("/match", json={"text": "الله"})
    assert r.status_code == 200
    assert r.json()["verse_reference"] is None


def test_match_requires_text(client):
    assert client.post("/match", json={}).status_code == 422


def test_verse_details(client, monkeypatch):
    async def fake_details(key, lang="en"):
        assert (key, lang) == ("18:10", "fr")
        return VerseDetails(
            chapter=18, chapter_name="Al-Kahf", chapter_name_arabic="الكهف",
            verses=[VerseText("18:10", 10, "إِذْ أَوَى", "Quand les jeunes gens")],
            start_verse=10, end_verse=10, total_verses=110, revelation_place="makkah",
        )
    monkeypatch.setattr(search, "fetch_verse_details", fake_details)

    r = client.get("/verse", params={"key": "18:10", "lang": "fr"})

    assert r.status_code == 200
    data = r.json()
    assert data["chapterName"] == "Al-Kahf"
    assert data["verses"][0]["verseKey"] == "18:10"
    assert data["totalVerses"] == 110


@pytest.mark.parametrize("key", ["abc", "115:1", "2:9-3"])
def test_verse_details_bad_key(client, key):
    r = client.get("/verse", params={"key": key})
    assert r.status_code == 400


def test_verse_details_missing_key(client):
    assert client.get("/verse").status_code == 422


def test_verse_details_upstream_failure(client, monkeypatch):
    async def failing(key, lang="en"):
        raise httpx.ConnectError("unreachable")
    monkeypatch.setattr(search, "fetch_verse_details", failing)

    r = client.get("/verse", params={"key": "18:10"})
    assert r.status_code == 502


def test_chapter_name(client):
    assert client.get("/chapters/36").json() == {"chapter": 36, "name": "Ya-Sin"}
    assert client.get("/chapters/300").json() == {"chapter": 300, "name": "Surah 300"}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
