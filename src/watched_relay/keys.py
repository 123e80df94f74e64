"""Derive the numeric content key from a Plex metadata path."""

import re

METADATA_MARKER = "/library/metadata/"

_DIGITS = re.compile(r"[0-9]+")


def extract_content_key(path: str) -> str | None:
    """Return the numeric key in ``path``, or None when there isn't one.

    ``/library/metadata/12345`` yields ``12345``. Without the marker, the
    segment after the last slash is used if it is purely digits.
    """
    if not path:
        return None

    idx = path.find(METADATA_MARKER)
    if idx != -1:
        candidate = path[idx + len(METADATA_MARKER):]
        if _DIGITS.fullmatch(candidate):
            return candidate

    slash = path.rfind("/")
    if slash != -1:
        candidate = path[slash + 1:]
        if _DIGITS.fullmatch(candidate):
            return candidate

    return None
