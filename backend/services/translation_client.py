"""
Translation Client - HTTP translation service integration
Sends one title per GET request and reads {"translated_text": "..."} back
"""
import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from core.config import settings
from core.errors import TranslationUnavailable

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES = (429, 500, 502, 503, 504)


def build_session(max_retries: int, backoff_factor: float) -> requests.Session:
    """
    Build a requests session with a bounded retry policy

    Connection errors and 429/5xx responses are retried with exponential
    backoff; once retries run out the last response (or error) is returned.
    """
    session = requests.Session()

    retry = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUS_CODES,
        allowed_methods=("GET",),
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=16)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"accept": "application/json"})

    return session


class TranslationClient:
    """
    Client for the external translation endpoint

    Every failure (network error, non-200 status, malformed JSON, missing or
    blank translated_text) is raised as TranslationUnavailable.
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        backoff_factor: float = 0.5,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or build_session(max_retries, backoff_factor)

    @classmethod
    def from_settings(cls) -> "TranslationClient":
        return cls(
            api_url=settings.TRANSLATION_API_URL,
            timeout=settings.TRANSLATION_TIMEOUT,
            max_retries=settings.TRANSLATION_MAX_RETRIES,
            backoff_factor=settings.TRANSLATION_BACKOFF_FACTOR,
        )

    def translate(self, text: str) -> str:
        """
        Translate a single text

        Args:
            text: Source text, sent URL-encoded as the "text" query parameter

        Returns:
            str: Translated text with surrounding whitespace removed

        Raises:
            TranslationUnavailable: If no usable translation came back
        """
        try:
            response = self.session.get(
                self.api_url,
                params={"text": text},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TranslationUnavailable(f"Translation request failed: {e}") from e

        if response.status_code != 200:
            raise TranslationUnavailable(
                f"Translation API returned {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TranslationUnavailable(f"Malformed translation response: {response.text[:200]}") from e

        translated = payload.get("translated_text") if isinstance(payload, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            raise TranslationUnavailable("Translation response has no translated_text")

        return translated.strip()

    def close(self):
        self.session.close()
