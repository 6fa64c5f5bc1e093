"""
Per-game append-only history ledgers.
"""
import sqlite3
from typing import List
from database.models import GameKind, HistoryRecord
from database.repo import Store
from errors import HistoryNotFound


class HistoryLedger:
    """History of settled bets for every game, keyed by 0-based counter."""

    def __init__(self, store: Store):
        self.store = store

    def append(self, game: GameKind, key: int, record: HistoryRecord):
        """Write a record once. Existing keys are never overwritten."""
        try:
            self.store.insert_history(game, key, record)
        except sqlite3.IntegrityError as e:
            raise ValueError(f"{game.value} history key {key} already written") from e

    def load(self, game: GameKind, key: int) -> HistoryRecord:
        record = self.store.load_history(game, key)
        if record is None:
            raise HistoryNotFound(game.value, key)
        return record

    def recent(self, game: GameKind, total: int, count: int) -> List[HistoryRecord]:
        """Return up to ``count`` of the latest ``total`` records, newest first."""
        real_count = min(total, max(count, 0))
        return [self.load(game, total - 1 - i) for i in range(real_count)]
