"""Define custom exceptions."""

from fastapi import Request
from fastapi.responses import PlainTextResponse


class RelayError(Exception):
    """Base error for the watched relay."""


class HistoryError(RelayError):
    """Fetching playback history failed; the request cannot continue."""


class HistoryConfigError(HistoryError):
    """API_HOST or API_KEY is missing but a Plex event needs the history API."""


class TransportError(HistoryError):
    """The history API could not be reached."""


class UpstreamStatusError(HistoryError):
    """The history API answered with a non-success status."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"received non-success response: {status_code} {reason}".rstrip())


class DecodeError(HistoryError):
    """The history API response could not be decoded, even after normalization."""


async def history_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:  # noqa: ARG001
    """Turn history failures into a short server error."""
    return PlainTextResponse("Error fetching metadata", status_code=500)
