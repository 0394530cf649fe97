"""Use case: export round history to CSV."""

from songguess.config import EXPORT_CSV_FILE
from songguess.domain.ledger import SessionLedger
from songguess.domain.ports import HistoryPort


class ExportHistoryUseCase:

    def __init__(self, history: HistoryPort):
        self.history = history

    def execute(self, ledger: SessionLedger, path: str = EXPORT_CSV_FILE) -> str:
        return self.history.export_csv(list(ledger.history), path)
