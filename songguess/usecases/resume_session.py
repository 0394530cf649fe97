"""Use case: rebuild the session ledger from stored history."""

import logging

from songguess.domain.errors import HistoryError
from songguess.domain.ledger import SessionLedger
from songguess.domain.ports import HistoryPort

logger = logging.getLogger("songguess.history")


class ResumeSessionUseCase:

    def __init__(self, history: HistoryPort):
        self.history = history

    def execute(self, fresh: bool = False) -> SessionLedger:
        if fresh:
            return SessionLedger()
        try:
            entries = self.history.load()
        except (OSError, HistoryError):
            logger.exception("Stored history is unreadable, starting a fresh session")
            return SessionLedger()
        logger.info("Loaded %s history entries", len(entries))
        return SessionLedger.from_history(entries)
