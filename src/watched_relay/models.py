"""Define the models needed."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator

_INTEGER = re.compile(r"-?[0-9]+")


class PlexMetadata(BaseModel):
    """Represent metadata for the media item."""
    key: str | None = None # e.g. /library/metadata/12345
    title: str | None = None # Episode or movie title

class PlexWebhookPayload(BaseModel):
    """Represent the overall structure of the parsed Plex webhook JSON."""
    event: str = ""
    Metadata: PlexMetadata | None = None

    def to_stop_event(self) -> "PlexStop":
        key = self.Metadata.key if self.Metadata and self.Metadata.key else ""
        return PlexStop(event=self.event, metadata_key=key)

class _NullsAsDefaults(BaseModel):
    """Treat explicit nulls in webhook JSON like missing fields."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

class JellyfinMediaStatus(_NullsAsDefaults):
    """Represent the playback state reported by Jellyfin."""
    PlaybackStatus: str = ""
    PositionTicks: int = 0
    IsPaused: bool = False
    PlayedToCompletion: bool = False

class JellyfinWebhookPayload(_NullsAsDefaults):
    """Represent the JSON body posted by the Jellyfin webhook plugin."""
    Event: str = ""
    NotificationType: str = ""
    ItemId: str = ""
    ItemType: str = "" # 'Episode', 'Movie', ...
    Name: str = ""
    SeriesName: str = ""
    SeasonNumber: int = 0
    EpisodeNumber: int = 0
    MediaStatus: JellyfinMediaStatus = Field(default_factory=JellyfinMediaStatus)

    def to_stop_event(self) -> "JellyfinStop":
        return JellyfinStop(
            event=self.Event,
            notification_type=self.NotificationType,
            item_type=self.ItemType,
            played_to_completion=self.MediaStatus.PlayedToCompletion,
            series_name=self.SeriesName,
            title=self.Name,
            season_number=self.SeasonNumber,
            episode_number=self.EpisodeNumber,
        )


class PlexStop(BaseModel):
    """A stop notification from Plex; the watch state lives in the history API."""

    model_config = ConfigDict(frozen=True)

    event: str
    metadata_key: str = ""

    @property
    def is_stop(self) -> bool:
        return self.event == "media.stop"


class JellyfinStop(BaseModel):
    """A stop notification from Jellyfin; carries everything needed to write a descriptor."""

    model_config = ConfigDict(frozen=True)

    event: str = ""
    notification_type: str = ""
    item_type: str = ""
    played_to_completion: bool = False
    series_name: str = ""
    title: str = ""
    season_number: int = 0
    episode_number: int = 0

    @property
    def is_stop(self) -> bool:
        return self.event == "playback.stop" or self.notification_type == "PlaybackStop"

    @property
    def is_episode(self) -> bool:
        return self.item_type == "Episode" and bool(self.series_name)

    @property
    def is_movie(self) -> bool:
        return self.item_type == "Movie"


StopEvent = PlexStop | JellyfinStop


class MediaIndex(RootModel[int | float | str | None]):
    """A season or episode index that the history API sends as a number, a string, or null."""

    root: int | float | str | None = None

    def as_int(self) -> int:
        """Resolve to an integer, 0 when empty, null, missing or unparsable."""
        value = self.root
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if value.is_integer() else 0
        if isinstance(value, str) and _INTEGER.fullmatch(value.strip()):
            return int(value.strip())
        return 0


class WatchDescriptor(BaseModel):
    """The fully resolved record written to the output directory."""
    full_title: str
    parent_media_index: int
    media_index: int
    watched_status: float
    percent_complete: int

    @classmethod
    def from_jellyfin(cls, event: JellyfinStop) -> "WatchDescriptor":
        """Map a completed Jellyfin stop event directly to a descriptor."""
        if event.is_episode:
            return cls(
                full_title=f"{event.series_name} - {event.title}",
                parent_media_index=event.season_number,
                media_index=event.episode_number,
                watched_status=1.0,
                percent_complete=100,
            )
        return cls(full_title=event.title, parent_media_index=0, media_index=0, watched_status=1.0, percent_complete=100)


class HistoryRecord(BaseModel):
    """One row of the history API's get_history response."""
    full_title: str = ""
    parent_media_index: MediaIndex = Field(default_factory=MediaIndex)
    media_index: MediaIndex = Field(default_factory=MediaIndex)
    watched_status: float = 0.0
    percent_complete: int = 0

    @field_validator("full_title", mode="before")
    @classmethod
    def _null_title(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("watched_status", "percent_complete", mode="before")
    @classmethod
    def _null_number(cls, value: Any) -> Any:
        return 0 if value is None else value

    def to_descriptor(self) -> WatchDescriptor:
        return WatchDescriptor(
            full_title=self.full_title,
            parent_media_index=self.parent_media_index.as_int(),
            media_index=self.media_index.as_int(),
            watched_status=self.watched_status,
            percent_complete=self.percent_complete,
        )


class HistoryData(BaseModel):
    data: list[HistoryRecord] | None = None

class HistoryEnvelope(BaseModel):
    data: HistoryData | None = None

class HistoryResponse(BaseModel):
    """Represent the {response: {data: {data: [...]}}} envelope."""
    response: HistoryEnvelope | None = None

    @property
    def records(self) -> list[HistoryRecord]:
        if self.response is None or self.response.data is None:
            return []
        return self.response.data.data or []
