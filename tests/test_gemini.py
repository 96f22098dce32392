import asyncio
import json

import httpx
import pytest

from dossier.backends.base import GenerationError, ReportGenerator
from dossier.backends.gemini import NO_SCRATCHPAD, GeminiBackend


def gemini_response(text, chunks=None):
    candidate = {"content": {"parts": [{"text": text}]}}
    if chunks is not None:
        candidate["groundingMetadata"] = {"groundingChunks": chunks}
    return {"candidates": [candidate]}


def make_backend(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiBackend(api_key="test-key", model="gemini-test", client=client)


def test_backend_satisfies_protocol():
    assert isinstance(GeminiBackend(api_key="k"), ReportGenerator)


def test_generate_splits_scratchpad_and_report():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        text = "<scratchpad>\n plan it \n</scratchpad>\n\n## Report\nBody [s](https://s.io)"
        chunks = [{"web": {"uri": "https://g1.io", "title": "g1"}}, {"retrieved": {}}, {"web": {}}]
        return httpx.Response(200, json=gemini_response(text, chunks))

    result = asyncio.run(make_backend(handler).generate("vector databases"))

    assert result.scratchpad == "plan it"
    assert result.report == "## Report\nBody [s](https://s.io)"
    assert result.source_urls == ["https://g1.io"]
    assert seen["url"].endswith("/models/gemini-test:generateContent")
    assert seen["key"] == "test-key"
    assert "vector databases" in seen["body"]["contents"][0]["parts"][0]["text"]
    assert seen["body"]["tools"] == [{"google_search": {}}]


def test_missing_scratchpad_falls_back():
    def handler(request):
        return httpx.Response(200, json=gemini_response("<query>echo</query>\n## Only report"))

    result = asyncio.run(make_backend(handler).generate("q"))
    assert result.scratchpad == NO_SCRATCHPAD
    assert result.report == "## Only report"
    assert result.source_urls == []


def test_http_error_raises_generation_error():
    def handler(request):
        return httpx.Response(429, json={"error": {"message": "quota"}})

    with pytest.raises(GenerationError, match="429"):
        asyncio.run(make_backend(handler).generate("q"))


def test_transport_error_raises_generation_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(GenerationError):
        asyncio.run(make_backend(handler).generate("q"))


def test_no_candidates_raises_generation_error():
    def handler(request):
        return httpx.Response(200, json={"candidates": []})

    with pytest.raises(GenerationError, match="no candidates"):
        asyncio.run(make_backend(handler).generate("q"))
