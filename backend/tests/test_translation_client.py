"""
Tests for the HTTP translation client
"""
import pytest
import requests

from core.errors import TranslationUnavailable
from services.translation_client import TranslationClient, build_session, RETRY_STATUS_CODES


class FakeResponse:
    def __init__(self, status_code=200, payload=None, body=None):
        self.status_code = status_code
        self._payload = payload
        self.text = body if body is not None else str(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Records requests and replays a canned response or error"""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.requests.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


def make_client(session):
    return TranslationClient("http://translator.local/translate", timeout=3.5, session=session)


class TestTranslate:
    """Successful and failed translations"""

    def test_returns_translated_text(self):
        session = FakeSession(FakeResponse(payload={"translated_text": "  MovieA \n"}))
        client = make_client(session)

        assert client.translate("电影A") == "MovieA"
        assert session.requests == [{
            "url": "http://translator.local/translate",
            "params": {"text": "电影A"},
            "timeout": 3.5,
        }]

    def test_network_error_is_unavailable(self):
        session = FakeSession(error=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(TranslationUnavailable, match="request failed"):
            make_client(session).translate("电影A")

    def test_timeout_is_unavailable(self):
        session = FakeSession(error=requests.exceptions.Timeout("slow"))

        with pytest.raises(TranslationUnavailable):
            make_client(session).translate("电影A")

    def test_non_200_is_unavailable(self):
        session = FakeSession(FakeResponse(status_code=503, body="busy"))

        with pytest.raises(TranslationUnavailable, match="503"):
            make_client(session).translate("电影A")

    def test_malformed_json_is_unavailable(self):
        session = FakeSession(FakeResponse(status_code=200, payload=None, body="<html>"))

        with pytest.raises(TranslationUnavailable, match="Malformed"):
            make_client(session).translate("电影A")

    @pytest.mark.parametrize("payload", [
        {},
        {"translated_text": ""},
        {"translated_text": "   "},
        {"translated_text": None},
        {"translated_text": ["MovieA"]},
        ["MovieA"],
    ])
    def test_missing_or_blank_field_is_unavailable(self, payload):
        session = FakeSession(FakeResponse(payload=payload))

        with pytest.raises(TranslationUnavailable):
            make_client(session).translate("电影A")

    def test_close_closes_session(self):
        session = FakeSession()
        make_client(session).close()
        assert session.closed is True


class TestRetryPolicy:
    """Session built with a bounded retry policy"""

    def test_session_mounts_bounded_retry(self):
        session = build_session(max_retries=3, backoff_factor=0.2)

        for prefix in ("http://", "https://"):
            retry = session.get_adapter(prefix + "example.com").max_retries
            assert retry.total == 3
            assert retry.backoff_factor == 0.2
            assert set(RETRY_STATUS_CODES) <= set(retry.status_forcelist)

    def test_from_settings_uses_configured_url(self, monkeypatch):
        from core.config import settings

        monkeypatch.setattr(settings, "TRANSLATION_API_URL", "http://configured:9000/translate")
        monkeypatch.setattr(settings, "TRANSLATION_TIMEOUT", 7.0)

        client = TranslationClient.from_settings()
        try:
            assert client.api_url == "http://configured:9000/translate"
            assert client.timeout == 7.0
        finally:
            client.close()
