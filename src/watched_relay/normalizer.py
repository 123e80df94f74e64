"""Patch the history API's empty-string numbers before decoding.

The upstream API sometimes sends ``""`` for fields declared numeric. Only the
four fields below are rewritten; anything else still has to decode as-is.
"""

import re

# Index fields are decoded as string-or-number, so they get a quoted zero.
# watched_status and percent_complete are plain numbers.
_REPLACEMENTS = (
    (re.compile(r'"parent_media_index"\s*:\s*""'), '"parent_media_index":"0"'),
    (re.compile(r'"media_index"\s*:\s*""'), '"media_index":"0"'),
    (re.compile(r'"watched_status"\s*:\s*""'), '"watched_status":0'),
    (re.compile(r'"percent_complete"\s*:\s*""'), '"percent_complete":0'),
)


def normalize_history_json(text: str) -> str:
    """Rewrite empty-string values of the known numeric fields to zero."""
    for pattern, replacement in _REPLACEMENTS:
        text = pattern.sub(replacement, text)
    return text
