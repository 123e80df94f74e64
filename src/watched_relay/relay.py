"""Relay completed playbacks from Plex and Jellyfin to descriptor files."""

import asyncio
import logging
from pathlib import Path

from .completion import jellyfin_event_complete, plex_record_complete
from .history import HistoryClient
from .keys import extract_content_key
from .models import JellyfinStop, PlexStop, StopEvent, WatchDescriptor
from .writer import DescriptorWriter, descriptor_filename

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


class WatchRelay:
    """Turn stop events into watch descriptors.

    Holds no per-request state, so concurrent requests need no locking. A
    repeated stop for the same item overwrites the same file.
    """

    def __init__(self, history_client: HistoryClient, writer: DescriptorWriter) -> None:
        """Initialize the relay with its collaborators."""
        self.history_client = history_client
        self.writer = writer

    async def process_event(self, event: StopEvent) -> list[Path]:
        """Process a stop event and return the descriptor files written."""
        if isinstance(event, PlexStop):
            return await self._handle_plex_stop(event)
        if isinstance(event, JellyfinStop):
            return self._handle_jellyfin_stop(event)
        msg = f"Unsupported event type: {type(event).__name__}"
        raise TypeError(msg)

    async def _handle_plex_stop(self, event: PlexStop) -> list[Path]:
        """Resolve a Plex stop through the history API.

        History errors propagate; the caller answers with a server error.
        """
        if not event.is_stop:
            logger.debug("Ignoring Plex event: %s", event.event)
            return []

        if not event.metadata_key:
            logger.debug("Invalid Plex request, no metadata found")
            return []

        key = extract_content_key(event.metadata_key)
        if key is None:
            logger.debug("Could not extract key from path: %s", event.metadata_key)
            return []

        # Blocking network I/O runs in a separate thread
        records = await asyncio.to_thread(self.history_client.fetch, key)
        if not records:
            logger.debug("No entries found in history for metadata key: %s", event.metadata_key)
            return []

        written = []
        for record in records:
            if not plex_record_complete(record):
                logger.debug("Media not marked as watched by Plex, ignoring")
                continue

            descriptor = record.to_descriptor()
            filename = descriptor_filename(descriptor.full_title, descriptor.parent_media_index, descriptor.media_index)
            logger.info("Media marked as watched by Plex, writing to file %s", filename)
            path = self.writer.write(descriptor, filename)
            if path is not None:
                written.append(path)
        return written

    def _handle_jellyfin_stop(self, event: JellyfinStop) -> list[Path]:
        """Map a Jellyfin stop straight to a descriptor; no lookup needed."""
        if not event.is_stop:
            logger.debug("Ignoring Jellyfin event: %s/%s", event.event, event.notification_type)
            return []

        if not jellyfin_event_complete(event):
            logger.debug("Jellyfin media not played to completion, ignoring")
            return []

        if event.is_episode:
            filename = descriptor_filename(event.series_name, event.season_number, event.episode_number)
            logger.info("Media marked as watched by Jellyfin, writing to file %s", filename)
        elif event.is_movie:
            filename = descriptor_filename(event.title)
            logger.info("Movie marked as watched by Jellyfin, writing to file %s", filename)
        else:
            logger.info("Unsupported Jellyfin item type: %s", event.item_type)
            return []

        path = self.writer.write(WatchDescriptor.from_jellyfin(event), filename)
        return [path] if path is not None else []
