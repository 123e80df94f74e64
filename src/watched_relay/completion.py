"""Decide whether a playback counts as watched."""

from .models import HistoryRecord, JellyfinStop

WATCHED_THRESHOLD = 1.0


def plex_record_complete(record: HistoryRecord) -> bool:
    # watched_status is a float flag; anything at or above 1 is watched
    return record.watched_status >= WATCHED_THRESHOLD


def jellyfin_event_complete(event: JellyfinStop) -> bool:
    return event.played_to_completion
