import httpx
import pytest

from quran_cite.types import SearchHit, Word

BASE_URL = "https://quran.test/api/v4"


def build_hit(verse_key, pattern, text=""):
    """Hit from a pattern: H = highlighted word, . = plain word, | = end marker."""
    words = []
    for i, c in enumerate(pattern):
        if c == "|":
            words.append(Word("end", str(i)))
        else:
            words.append(Word("word", f"w{i}", highlighted=(c == "H")))
    return SearchHit(verse_key=verse_key, text=text, words=words)


def raw_result(verse_key, pattern):
    """The same pattern in quran.com /search JSON shape."""
    words = []
    for i, c in enumerate(pattern):
        if c == "|":
            words.append({"char_type": "end", "text": str(i)})
        else:
            w = {"char_type": "word", "text": f"w{i}"}
            if c == "H":
                w["highlight"] = True
            words.append(w)
    return {"verse_key": verse_key, "verse_id": 1, "text": "", "words": words}


def search_body(*results):
    return {"search": {"query": "", "total_results": len(results), "results": list(results)}}


class FakeSearchAPI:
    """Mock transport for httpx that records the requests it serves."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.handler(request)

    def client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def make_hit():
    return build_hit


@pytest.fixture
def fake_api():
    def factory(handler):
        return FakeSearchAPI(handler)
    return factory
