"""Shared in-memory adapters and fixtures for all bounded contexts."""

import random
from typing import Callable, Optional

import pytest

from songguess.config import SIMULATION_ENV_VAR
from songguess.domain.errors import CatalogError, PlaybackError
from songguess.domain.ledger import SessionLedger
from songguess.domain.model import Album, Artist, HistoryEntry, Playlist, Track
from songguess.domain.ports import (
    CatalogPort,
    HistoryPort,
    PlaybackCallback,
    PlaybackPort,
    SchedulerPort,
    TickHandle,
)


# ── In-memory adapters ──────────────────────────────────────────────


class InMemoryPlayback(PlaybackPort):
    """Playback double. With ``auto_ack=False`` completions are delivered by the test."""

    def __init__(
        self,
        auto_ack: bool = True,
        start_error: Optional[str] = None,
        raise_on_start: Optional[str] = None,
        raise_on_toggle: Optional[str] = None,
    ):
        self.auto_ack = auto_ack
        self.start_error = start_error
        self.raise_on_start = raise_on_start
        self.raise_on_toggle = raise_on_toggle
        self.started: list[str] = []
        self.toggles = 0
        self.stops = 0
        self.pending_starts: list[PlaybackCallback] = []
        self.pending_toggles: list[Optional[PlaybackCallback]] = []
        self._playing = False
        self.initialized = True

    def start(self, track: Track, on_done: PlaybackCallback) -> None:
        if self.raise_on_start:
            raise PlaybackError(self.raise_on_start)
        self.started.append(track.id)
        if self.auto_ack:
            self._playing = self.start_error is None
            on_done(self.start_error)
        else:
            self.pending_starts.append(on_done)

    def toggle(self, on_done: Optional[PlaybackCallback] = None) -> None:
        if self.raise_on_toggle:
            raise PlaybackError(self.raise_on_toggle)
        self.toggles += 1
        if self.auto_ack:
            self._playing = not self._playing
            if on_done:
                on_done(None)
        else:
            self.pending_toggles.append(on_done)

    def stop(self) -> None:
        self.stops += 1
        self._playing = False

    def ack_start(self, error: Optional[str] = None) -> None:
        callback = self.pending_starts.pop(0)
        if error is None:
            self._playing = True
        callback(error)

    def ack_toggle(self, error: Optional[str] = None) -> None:
        callback = self.pending_toggles.pop(0)
        if callback:
            callback(error)

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def is_initialized(self) -> bool:
        return self.initialized

    @property
    def error(self) -> Optional[str]:
        return self.start_error


class ManualTickHandle(TickHandle):
    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(SchedulerPort):
    """Ticks only when the test calls ``advance``."""

    def __init__(self):
        self.handles: list[ManualTickHandle] = []

    def schedule_repeating(self, interval: float, callback: Callable[[], None]) -> TickHandle:
        handle = ManualTickHandle(interval, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[ManualTickHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, ticks: int = 1) -> None:
        for _ in range(ticks):
            for handle in self.active:
                handle.callback()


class InMemoryCatalog(CatalogPort):
    def __init__(self, playlists: Optional[dict[str, list[Track]]] = None, fail: Optional[str] = None):
        self.playlists = playlists or {}
        self.fail = fail
        self.requested_tracks: list[str] = []

    def list_playlists(self) -> list[Playlist]:
        if self.fail:
            raise CatalogError(self.fail)
        return [Playlist(id=pid, name=pid.title(), track_count=len(ts)) for pid, ts in self.playlists.items()]

    def list_tracks(self, playlist_id: str) -> list[Track]:
        if self.fail:
            raise CatalogError(self.fail)
        return list(self.playlists.get(playlist_id, []))

    def get_track(self, track_id: str) -> Track:
        self.requested_tracks.append(track_id)
        if self.fail:
            raise CatalogError(self.fail)
        for tracks in self.playlists.values():
            for t in tracks:
                if t.id == track_id:
                    return t
        raise CatalogError("Failed to load challenge track")


class InMemoryHistory(HistoryPort):
    def __init__(self, entries: Optional[list[HistoryEntry]] = None):
        self.entries: list[HistoryEntry] = list(entries or [])
        self.csv_exports: list[str] = []

    def append(self, entry: HistoryEntry) -> None:
        self.entries.append(entry)

    def load(self) -> list[HistoryEntry]:
        return list(self.entries)

    def export_csv(self, entries: list[HistoryEntry], path: str) -> str:
        self.csv_exports.append(path)
        return path


class FakeSecretStore:
    def __init__(self, available: bool = True):
        self.available = available
        self.data: dict[str, str] = {}

    def get(self, key: str):
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        if not self.available:
            return False
        if value:
            self.data[key] = value
        else:
            self.data.pop(key, None)
        return True


def _make_track(track_id: str, name: str, artist: str, cover: str = "") -> Track:
    return Track(
        id=track_id,
        name=name,
        artists=(Artist(id=f"ar-{track_id}", name=artist),),
        album=Album(id=f"al-{track_id}", name=f"{name} (Album)", image_url=cover or None),
        uri=f"spotify:track:{track_id}",
    )


# ── Shared fixtures ─────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _no_simulation_env(monkeypatch):
    monkeypatch.delenv(SIMULATION_ENV_VAR, raising=False)


@pytest.fixture
def yesterday():
    return _make_track("t-yesterday", "Yesterday", "The Beatles", cover="https://cdn.example/help.jpg")


@pytest.fixture
def track_a():
    return _make_track("t1", "Chill Vibes", "DJ Smooth")


@pytest.fixture
def track_b():
    return _make_track("t2", "Party Starter", "MC Hype")


@pytest.fixture
def track_c():
    return _make_track("t3", "Slow Motion", "The Drifters")


@pytest.fixture
def playlist_tracks(track_a, track_b, track_c):
    return [track_a, track_b, track_c]


@pytest.fixture
def ledger():
    return SessionLedger()


@pytest.fixture
def playback():
    return InMemoryPlayback()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def catalog(playlist_tracks, yesterday):
    return InMemoryCatalog({"mix": playlist_tracks, "classics": [yesterday]})


@pytest.fixture
def history():
    return InMemoryHistory()


@pytest.fixture
def rng():
    return random.Random(7)


@pytest.fixture
def make_track():
    return _make_track


@pytest.fixture
def playback_factory():
    return InMemoryPlayback


@pytest.fixture
def catalog_factory():
    return InMemoryCatalog


@pytest.fixture
def secret_store():
    return FakeSecretStore()


@pytest.fixture
def secret_store_factory():
    return FakeSecretStore
