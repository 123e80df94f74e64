"""Query the history API for the latest playback of a library item."""

import logging

import pydantic
import requests

from .config import Settings
from .exceptions import DecodeError, HistoryConfigError, TransportError, UpstreamStatusError
from .models import HistoryRecord, HistoryResponse
from .normalizer import normalize_history_json

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


class HistoryClient:
    """Handle communication with the Tautulli-compatible history API."""

    def __init__(self, settings: Settings) -> None:
        """Keep the connection details; nothing is contacted until fetch()."""
        self.api_host = settings.API_HOST
        self.api_key = settings.API_KEY
        self.timeout = settings.API_TIMEOUT_SECONDS

    @property
    def url(self) -> str:
        return f"http://{self.api_host}/api/v2"

    def build_params(self, key: str) -> dict[str, str]:
        """Ask for the single most recent history entry for ``key``."""
        return {
            "apikey": self.api_key,
            "cmd": "get_history",
            "rating_key": key,
            "order_column": "started",
            "order": "desc",
            "length": "1",
        }

    def fetch(self, key: str) -> list[HistoryRecord]:
        """Fetch history records for ``key``.

        Blocking; run it in a worker thread from async code. Never retried.

        Raises:
            HistoryConfigError: API_HOST or API_KEY is not configured.
            TransportError: the API could not be reached.
            UpstreamStatusError: the API answered with a non-2xx status.
            DecodeError: the body is not valid JSON even after normalization.
        """
        if not (self.api_host and self.api_key):
            msg = "API_HOST and API_KEY must be set to resolve Plex events"
            raise HistoryConfigError(msg)

        logger.debug("Requesting history for rating key %s from %s", key, self.api_host)
        try:
            resp = requests.get(self.url, params=self.build_params(key), timeout=self.timeout)
        except requests.RequestException as e:
            # the request error text carries the full URL, API key included
            msg = f"error making HTTP request to {self.url}: {type(e).__name__}"
            raise TransportError(msg) from None

        if not 200 <= resp.status_code < 300:
            raise UpstreamStatusError(resp.status_code, resp.reason or "")

        body = normalize_history_json(resp.text)
        try:
            parsed = HistoryResponse.model_validate_json(body)
        except pydantic.ValidationError as e:
            msg = f"error decoding history response: {e}"
            raise DecodeError(msg) from e

        records = parsed.records
        logger.debug("Found %d entries for %s", len(records), key)
        return records
