"""Gemini quote source.

Asks a Gemini model, grounded with Google Search, for today's hallmark gold
and silver price per tola and returns its answer verbatim. The answer is
usually a small object literal but can arrive fenced, single-quoted or
wrapped in prose.

API Reference:
    Base URL: https://generativelanguage.googleapis.com/v1beta
    Generate: POST /models/{model}:generateContent
    Models:   GET  /models/{model}
    Auth:     x-goog-api-key header

Example:
    >>> from metalwatch.ingestion.collectors.gemini_collector import GeminiQuoteCollector
    >>>
    >>> collector = GeminiQuoteCollector(api_key="...")
    >>> raw = collector.fetch()
"""

import logging
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from metalwatch.ingestion.collectors.base_collector import BaseQuoteCollector
from metalwatch.shared.errors import FetchError

PRICE_PROMPT = """
Use this link: {source_url}. What is the hallmark gold price per tola and silver price per tola today? Answer in this JSON schema:
Price = {{'gold': number, 'silver': number}}
Return: Price
"""


class GeminiQuoteCollector(BaseQuoteCollector):
    """Quote source backed by the Gemini ``generateContent`` REST endpoint."""

    SOURCE_NAME = "gemini"

    API_BASE = "https://generativelanguage.googleapis.com/v1beta"
    GENERATE_ENDPOINT = "/models/{model}:generateContent"
    MODEL_ENDPOINT = "/models/{model}"

    DEFAULT_MODEL = "gemini-2.0-flash"
    DEFAULT_SOURCE_URL = "https://www.hamropatro.com/gold"

    # Transport-level retries for 5xx only; parse failures are retried by the pipeline
    MAX_RETRIES: int = 2

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        source_url: str | None = None,
        timeout: float = 30,
        session: requests.Session | None = None,
        log_file: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the Gemini collector.

        Args:
            api_key: Gemini API key.
            model: Model name (default: gemini-2.0-flash).
            source_url: Page the model is pointed at for the price.
            timeout: Per-request timeout in seconds.
            session: Pre-built session, mainly for tests.
            log_file: Optional path for file-based logging.
            logger: Pre-built logger.
        """
        super().__init__(log_file=log_file, logger=logger)
        if not api_key:
            raise ValueError("Gemini API key is required")
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.source_url = source_url or self.DEFAULT_SOURCE_URL
        self.timeout = timeout
        self._session = session or self._build_session()

    # ------------------------------------------------------------------
    # BaseQuoteCollector interface
    # ------------------------------------------------------------------

    def fetch(self) -> str:
        """Ask the model for today's prices and return its text answer.

        Returns:
            Concatenated text of the first candidate, or "" if the model
            returned no text (blocked or empty answer).

        Raises:
            FetchError: Network failure, HTTP error or a non-JSON body.
        """
        url = f"{self.API_BASE}{self.GENERATE_ENDPOINT.format(model=self.model)}"
        body = {
            "contents": [{"parts": [{"text": PRICE_PROMPT.format(source_url=self.source_url)}]}],
            "tools": [{"google_search": {}}],
        }

        try:
            response = self._session.post(
                url, json=body, headers=self._auth_headers(), timeout=self.timeout
            )
        except requests.RequestException as e:
            raise FetchError(f"Gemini request failed: {e}") from e

        if response.status_code >= 400:
            raise FetchError(
                f"Gemini returned HTTP {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"Gemini returned a non-JSON body: {e}") from e

        text = self._candidate_text(payload)
        self.logger.debug("Gemini answer: %r", text)
        return text

    def health_check(self) -> bool:
        """Verify the configured model is reachable with this key.

        Returns:
            True if the model metadata endpoint responds with HTTP 200.
        """
        try:
            url = f"{self.API_BASE}{self.MODEL_ENDPOINT.format(model=self.model)}"
            response = self._session.get(url, headers=self._auth_headers(), timeout=10)
            return bool(response.status_code == 200)
        except requests.RequestException:
            return False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    @staticmethod
    def _candidate_text(payload: object) -> str:
        """Text of the first candidate; "" for any body not shaped like one."""
        if not isinstance(payload, dict):
            return ""
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""
        return "".join(
            part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
        )

    def _build_session(self) -> requests.Session:
        """Build a requests Session with retry adapter for transient errors."""
        session = requests.Session()
        retry = Retry(
            total=self.MAX_RETRIES,
            backoff_factor=1.0,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET", "POST"],
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.headers.update(
            {
                "User-Agent": "metalwatch/0.1",
                "Accept": "application/json",
            }
        )
        return session
