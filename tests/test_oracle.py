import json

import httpx
import pytest

from conftest import run
from hireloop.config.settings import Settings
from hireloop.core.exceptions import (
    OracleMalformedResponse,
    OracleRateLimited,
    OracleUnavailable,
)
from hireloop.core.oracle import GradingOracle, parse_oracle_json


def _settings(**overrides):
    values = {
        "oracle_api_key": "test-key",
        "oracle_model": "test-model",
        "oracle_backoff_base_seconds": 0,
        "oracle_rate_limit_retries": 3,
    }
    values.update(overrides)
    return Settings(**values)


def _completion(content):
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def _oracle(handler, settings=None):
    settings = settings or _settings()
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="https://oracle.test/v1",
        headers={"Authorization": f"Bearer {settings.oracle_api_key}"},
    )
    return GradingOracle(settings=settings, client=client)


def test_complete_returns_message_text():
    seen = []

    def handler(request):
        seen.append(request)
        return _completion('```json\n{"score": 7}\n```')

    text = run(_oracle(handler).complete("Grade this"))

    assert text == '{"score": 7}'
    request = seen[0]
    assert request.url.path == "/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    body = json.loads(request.content)
    assert body["model"] == "test-model"
    assert body["response_format"] == {"type": "json_object"}
    assert body["messages"][0]["content"].startswith("Grade this")
    assert "Return ONLY a valid JSON object" in body["messages"][0]["content"]


def test_multipart_content_is_joined():
    def handler(request):
        return _completion([{"type": "text", "text": '{"a":'}, " 1}"])

    assert run(_oracle(handler).complete("x")) == '{"a": 1}'


def test_rate_limit_is_retried_then_succeeds():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(429, json={"error": "slow down"})
        return _completion('{"ok": true}')

    assert run(_oracle(handler).complete("x")) == '{"ok": true}'
    assert len(calls) == 3


def test_persistent_rate_limit_gives_up_after_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(429)

    with pytest.raises(OracleRateLimited):
        run(_oracle(handler).complete("x"))
    assert len(calls) == 4


def test_server_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500, text="boom")

    with pytest.raises(OracleUnavailable) as excinfo:
        run(_oracle(handler).complete("x"))
    assert not isinstance(excinfo.value, OracleRateLimited)
    assert len(calls) == 1


def test_transport_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(OracleUnavailable):
        run(_oracle(handler).complete("x"))


def test_non_json_envelope_is_malformed():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(OracleMalformedResponse):
        run(_oracle(handler).complete("x"))


# ============================================================================
# PARSING
# ============================================================================

def test_parse_plain_and_fenced_json():
    assert parse_oracle_json('{"a": 1}') == {"a": 1}
    assert parse_oracle_json('```json\n{"a": 2}\n```') == {"a": 2}


def test_parse_recovers_object_from_surrounding_prose():
    assert parse_oracle_json('Sure! Here you go: {"score": 80} Hope it helps.') == {"score": 80}


@pytest.mark.parametrize("raw", ["", "no json here", "[1, 2, 3]", "{broken", None])
def test_parse_rejects_non_objects(raw):
    with pytest.raises(OracleMalformedResponse):
        parse_oracle_json(raw)
