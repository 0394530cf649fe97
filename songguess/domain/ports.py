"""Ports (interfaces) for the hexagonal architecture."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from songguess.domain.model import HistoryEntry, Playlist, Track

# Completion callback for playback requests: ``None`` on success, else a
# human-readable error message.
PlaybackCallback = Callable[[Optional[str]], None]


class PlaybackPort(ABC):
    """Audio output. Requests complete later through ``on_done``."""

    @abstractmethod
    def start(self, track: Track, on_done: PlaybackCallback) -> None:
        ...

    @abstractmethod
    def toggle(self, on_done: Optional[PlaybackCallback] = None) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        ...

    @property
    @abstractmethod
    def is_initialized(self) -> bool:
        ...

    @property
    @abstractmethod
    def error(self) -> Optional[str]:
        ...


class CatalogPort(ABC):
    @abstractmethod
    def list_playlists(self) -> list[Playlist]:
        ...

    @abstractmethod
    def list_tracks(self, playlist_id: str) -> list[Track]:
        ...

    @abstractmethod
    def get_track(self, track_id: str) -> Track:
        ...


class HistoryPort(ABC):
    @abstractmethod
    def append(self, entry: HistoryEntry) -> None:
        ...

    @abstractmethod
    def load(self) -> list[HistoryEntry]:
        ...

    @abstractmethod
    def export_csv(self, entries: list[HistoryEntry], path: str) -> str:
        ...


class TickHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Stop the repeating callback. Calling it again is a no-op."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class SchedulerPort(ABC):
    @abstractmethod
    def schedule_repeating(self, interval: float, callback: Callable[[], None]) -> TickHandle:
        ...


class ConfigPort(ABC):
    @abstractmethod
    def load(self) -> dict:
        ...

    @abstractmethod
    def save(self, cfg: dict) -> None:
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        ...
