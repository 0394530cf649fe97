"""JSON file-based round history persistence adapter."""

import csv
import json
import os
from dataclasses import asdict

from songguess.config import EXPORT_CSV_FILE, HISTORY_FILE
from songguess.domain.errors import HistoryError
from songguess.domain.model import HistoryEntry
from songguess.domain.ports import HistoryPort


class JsonHistoryAdapter(HistoryPort):
    """Stores ``{"history": [...]}``. A file that does not parse raises HistoryError."""

    def __init__(self, path: str = HISTORY_FILE):
        self.path = path

    def append(self, entry: HistoryEntry) -> None:
        entries = self.load()
        entries.append(entry)
        self._write(entries)

    def load(self) -> list[HistoryEntry]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise HistoryError(f"History file {self.path} is not valid JSON") from exc
        try:
            return [HistoryEntry(**e) for e in data.get("history", [])]
        except (AttributeError, TypeError) as exc:
            raise HistoryError(f"History file {self.path} has an unexpected layout") from exc

    def export_csv(self, entries: list[HistoryEntry], path: str = EXPORT_CSV_FILE) -> str:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["track_id", "track_name", "artist", "score", "time", "timestamp"])
            for e in entries:
                writer.writerow([
                    e.track_id,
                    e.track_name,
                    e.artist_name,
                    e.score,
                    f"{e.time:.1f}",
                    e.timestamp,
                ])
        return path

    def _write(self, entries: list[HistoryEntry]) -> None:
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({"history": [asdict(e) for e in entries]}, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)
