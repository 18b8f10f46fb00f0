"""Unit tests for the Gemini client."""
import json

import httpx
import pytest

from skillflow.config import Settings
from skillflow.integrations import GeminiAuthError, GeminiClient, GeminiError
from skillflow.integrations.gemini import EXECUTOR_PREAMBLE


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("skillflow.integrations.gemini.time.sleep", lambda s: None)


def _client(handler, **settings):
    transport = httpx.MockTransport(handler)
    return GeminiClient(settings=Settings(**settings), client=httpx.Client(transport=transport))


def test_generate_parses_text(sample_gemini_response):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = request.url
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=sample_gemini_response)

    text = _client(handler).generate("Summarize this", "gm-key")

    assert text == "This is a test response from Gemini."
    assert captured["url"].path.endswith("/gemini-2.0-flash:generateContent")
    assert captured["url"].params["key"] == "gm-key"
    assert captured["body"]["contents"][0]["parts"][0]["text"] == EXECUTOR_PREAMBLE + "Summarize this"
    assert captured["body"]["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 4096}


def test_empty_candidates_give_empty_text():
    text = _client(lambda r: httpx.Response(200, json={"candidates": []})).generate("p", "k")

    assert text == ""


@pytest.mark.parametrize("status", [400, 403])
def test_rejected_key(status):
    def handler(request):
        return httpx.Response(status, json={"error": {"message": "API key not valid"}})

    with pytest.raises(GeminiAuthError) as exc_info:
        _client(handler).generate("p", "bad")

    assert exc_info.value.status_code == status


def test_server_error_is_retried_then_succeeds(sample_gemini_response):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(503, text="overloaded")
        return httpx.Response(200, json=sample_gemini_response)

    text = _client(handler, gemini_max_retries=1).generate("p", "k")

    assert len(calls) == 2
    assert text.startswith("This is a test response")


def test_rate_limit_exhausts_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(429, text="slow down")

    with pytest.raises(GeminiError) as exc_info:
        _client(handler, gemini_max_retries=2).generate("p", "k")

    assert len(calls) == 3
    assert not isinstance(exc_info.value, GeminiAuthError)
    assert exc_info.value.details == "slow down"


def test_other_client_errors_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404, text="no such model")

    with pytest.raises(GeminiError):
        _client(handler, gemini_max_retries=2).generate("p", "k")

    assert len(calls) == 1


def test_connection_error():
    def handler(request):
        raise httpx.ConnectError("unreachable")

    with pytest.raises(GeminiError, match="HTTP error"):
        _client(handler).generate("p", "k")
