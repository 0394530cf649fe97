"""Session ledger: which tracks were played and how each round went."""

import threading
from typing import Iterable, Sequence

from songguess.domain.model import HistoryEntry, Track


class SessionLedger:
    """Played-track set plus append-only round history.

    Owned by the caller's session and passed explicitly to the use cases.
    Mutations and reads share one lock so ``unplayed_of`` never observes a
    half-applied ``record``.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._played: set[str] = set()
        self._history: list[HistoryEntry] = []

    @classmethod
    def from_history(cls, entries: Iterable[HistoryEntry]) -> "SessionLedger":
        ledger = cls()
        for entry in entries:
            ledger.record(entry)
        return ledger

    @property
    def played_track_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._played)

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        with self._lock:
            return tuple(self._history)

    @property
    def played_count(self) -> int:
        with self._lock:
            return len(self._history)

    def mark_played(self, track_id: str) -> None:
        with self._lock:
            self._played.add(track_id)

    def record(self, entry: HistoryEntry) -> None:
        with self._lock:
            self._history.append(entry)
            self._played.add(entry.track_id)

    def is_played(self, track_id: str) -> bool:
        with self._lock:
            return track_id in self._played

    def unplayed_of(self, candidates: Sequence[Track]) -> list[Track]:
        with self._lock:
            return [t for t in candidates if t.id not in self._played]

    def is_exhausted(self, candidates: Sequence[Track]) -> bool:
        return not self.unplayed_of(candidates)
