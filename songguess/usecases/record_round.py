"""Use case: record a scored round in the ledger and the history store."""

import logging
import time
from typing import Callable, Optional

from songguess.domain.errors import HistoryError
from songguess.domain.ledger import SessionLedger
from songguess.domain.model import HistoryEntry, RoundResult, Track
from songguess.domain.ports import HistoryPort

logger = logging.getLogger("songguess.history")


def _now_ms() -> int:
    return int(time.time() * 1000)


class RecordRoundUseCase:

    def __init__(
        self,
        ledger: SessionLedger,
        history: Optional[HistoryPort] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        self.ledger = ledger
        self.history = history
        self.clock = clock

    def execute(self, track: Track, result: RoundResult, elapsed_seconds: float) -> HistoryEntry:
        entry = HistoryEntry(
            track_id=track.id,
            track_name=track.name,
            artist_name=track.primary_artist,
            album_image=track.cover_url,
            score=result.score,
            time=elapsed_seconds,
            timestamp=self.clock(),
        )
        self.ledger.record(entry)

        if self.history is not None:
            try:
                self.history.append(entry)
            except (OSError, HistoryError):
                # The in-memory ledger stays authoritative for this session.
                logger.exception("Could not persist history entry for %s", track.id)
        return entry
