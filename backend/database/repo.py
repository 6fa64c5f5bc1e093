"""
Database repository for the settlement engine.
Persists config, per-game history ledgers, pool balances and contract info in SQLite.
"""
import sqlite3
import logging
import threading
from contextlib import contextmanager
from typing import Optional, Iterator
from .models import Config, HistoryRecord, Outcome, GameKind, ContractInfo

logger = logging.getLogger(__name__)


class Database:
    """Database repository.

    All reads and writes go through ``transaction()``, which serializes calls
    inside the process and holds an exclusive SQLite lock across processes.
    """

    def __init__(self, db_path: str = "settlement.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode: transactions are opened explicitly below
        conn = sqlite3.connect(self.db_path, timeout=30, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize database schema."""
        conn = self._connect()
        cursor = conn.cursor()

        # Singleton config row
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS config (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                owner TEXT NOT NULL,
                denom TEXT NOT NULL,
                enabled INTEGER NOT NULL DEFAULT 1,
                flip_count INTEGER NOT NULL DEFAULT 0,
                rps_count INTEGER NOT NULL DEFAULT 0,
                dice_count INTEGER NOT NULL DEFAULT 0,
                roulette_count INTEGER NOT NULL DEFAULT 0
            )
        """)

        # One append-only ledger per game, keyed by the pre-increment counter
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS history (
                game TEXT NOT NULL,
                key INTEGER NOT NULL,
                id INTEGER NOT NULL,
                address TEXT NOT NULL,
                level INTEGER NOT NULL,
                win INTEGER,
                bet_amount TEXT NOT NULL,
                timestamp INTEGER NOT NULL,
                PRIMARY KEY (game, key)
            )
        """)

        # Bank balances (amounts stored as text, they can exceed 64 bits)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS balances (
                address TEXT NOT NULL,
                denom TEXT NOT NULL,
                amount TEXT NOT NULL DEFAULT '0',
                PRIMARY KEY (address, denom)
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS contract_info (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                contract TEXT NOT NULL,
                version TEXT NOT NULL
            )
        """)

        conn.close()
        logger.info(f"Database initialized at {self.db_path}")

    @contextmanager
    def transaction(self) -> Iterator["Store"]:
        """Run one all-or-nothing unit of work.

        Commits when the block exits normally, rolls back and re-raises on
        any exception.
        """
        with self._lock:
            conn = self._connect()
            try:
                conn.execute("BEGIN EXCLUSIVE")
                try:
                    yield Store(conn)
                    conn.execute("COMMIT")
                except Exception:
                    conn.execute("ROLLBACK")
                    raise
            finally:
                conn.close()


class Store:
    """Storage operations bound to an open transaction."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # === Config ===

    def load_config(self) -> Optional[Config]:
        row = self.conn.execute("SELECT * FROM config WHERE id = 1").fetchone()
        if not row:
            return None
        return Config(
            owner=row["owner"],
            denom=row["denom"],
            enabled=bool(row["enabled"]),
            flip_count=row["flip_count"],
            rps_count=row["rps_count"],
            dice_count=row["dice_count"],
            roulette_count=row["roulette_count"],
        )

    def save_config(self, config: Config):
        self.conn.execute("""
            INSERT OR REPLACE INTO config (
                id, owner, denom, enabled, flip_count, rps_count, dice_count, roulette_count
            ) VALUES (1, ?, ?, ?, ?, ?, ?, ?)
        """, (
            config.owner, config.denom, int(config.enabled),
            config.flip_count, config.rps_count, config.dice_count, config.roulette_count,
        ))

    # === History ===

    def load_history(self, game: GameKind, key: int) -> Optional[HistoryRecord]:
        row = self.conn.execute(
            "SELECT * FROM history WHERE game = ? AND key = ?", (game.value, key)
        ).fetchone()
        if not row:
            return None
        return self._row_to_record(row)

    def insert_history(self, game: GameKind, key: int, record: HistoryRecord):
        """Append a record. Raises sqlite3.IntegrityError if the key exists."""
        self.conn.execute("""
            INSERT INTO history (game, key, id, address, level, win, bet_amount, timestamp)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            game.value, key, record.id, record.address, record.level,
            int(record.win) if record.win is not None else None,
            str(record.bet_amount), record.timestamp,
        ))

    def _row_to_record(self, row: sqlite3.Row) -> HistoryRecord:
        return HistoryRecord(
            id=row["id"],
            address=row["address"],
            level=row["level"],
            win=Outcome(row["win"]) if row["win"] is not None else None,
            bet_amount=int(row["bet_amount"]),
            timestamp=row["timestamp"],
        )

    # === Balances ===

    def get_balance(self, address: str, denom: str) -> int:
        row = self.conn.execute(
            "SELECT amount FROM balances WHERE address = ? AND denom = ?", (address, denom)
        ).fetchone()
        return int(row["amount"]) if row else 0

    def adjust_balance(self, address: str, denom: str, delta: int) -> int:
        """Add ``delta`` to a balance. Returns the new balance.

        Raises:
            ValueError: If the balance would go negative.
        """
        balance = self.get_balance(address, denom) + delta
        if balance < 0:
            raise ValueError(f"Balance of {address} would go negative ({balance} {denom})")
        self.conn.execute(
            "INSERT OR REPLACE INTO balances (address, denom, amount) VALUES (?, ?, ?)",
            (address, denom, str(balance)),
        )
        return balance

    # === Contract info ===

    def load_contract_info(self) -> Optional[ContractInfo]:
        row = self.conn.execute("SELECT * FROM contract_info WHERE id = 1").fetchone()
        if not row:
            return None
        return ContractInfo(contract=row["contract"], version=row["version"])

    def save_contract_info(self, info: ContractInfo):
        self.conn.execute(
            "INSERT OR REPLACE INTO contract_info (id, contract, version) VALUES (1, ?, ?)",
            (info.contract, info.version),
        )
