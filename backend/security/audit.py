"""
Security audit logging system.
Tracks administrative and rejected settlement calls for forensics and monitoring.
"""
import logging
import sqlite3
from contextlib import closing
from datetime import datetime
from typing import Optional
from enum import Enum

logger = logging.getLogger(__name__)


class AuditEventType(Enum):
    """Types of events to audit."""
    # Lifecycle
    CONTRACT_INSTANTIATED = "contract_instantiated"
    CONTRACT_MIGRATED = "contract_migrated"

    # Settlement
    BET_REJECTED = "bet_rejected"

    # Operator actions
    WITHDRAWAL = "withdrawal"
    OWNER_UPDATED = "owner_updated"
    ENABLED_UPDATED = "enabled_updated"
    UNAUTHORIZED_ACTION = "unauthorized_action"


class AuditSeverity(Enum):
    """Severity levels for audit events."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AuditLogger:
    """Audit logging system for operator and rejection events."""

    def __init__(self, db_path: str = "settlement.db"):
        self.db_path = db_path
        self._init_audit_table()

    def _init_audit_table(self):
        """Initialize audit log table."""
        conn = sqlite3.connect(self.db_path)
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS audit_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                event_type TEXT NOT NULL,
                address TEXT,
                details TEXT,
                severity TEXT NOT NULL,
                timestamp TEXT NOT NULL
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_audit_timestamp ON audit_logs(timestamp)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_audit_address ON audit_logs(address)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_audit_event_type ON audit_logs(event_type)")

        conn.commit()
        conn.close()

    def log(
        self,
        event_type: AuditEventType,
        severity: AuditSeverity = AuditSeverity.INFO,
        address: Optional[str] = None,
        details: Optional[str] = None,
    ):
        """Log an audit event.

        Write failures are reported to the application logger and never
        raised to the caller.

        Args:
            event_type: Type of event
            severity: Severity level
            address: Caller address if applicable
            details: Additional details
        """
        try:
            with closing(sqlite3.connect(self.db_path, timeout=30)) as conn:
                conn.execute("""
                    INSERT INTO audit_logs (event_type, address, details, severity, timestamp)
                    VALUES (?, ?, ?, ?, ?)
                """, (
                    event_type.value,
                    address,
                    details,
                    severity.value,
                    datetime.utcnow().isoformat(),
                ))
                conn.commit()

            log_msg = f"[AUDIT] {event_type.value}"
            if address:
                log_msg += f" | address={address}"
            if details:
                log_msg += f" | {details}"

            if severity == AuditSeverity.CRITICAL:
                logger.critical(log_msg)
            elif severity == AuditSeverity.WARNING:
                logger.warning(log_msg)
            else:
                logger.info(log_msg)

        except sqlite3.Error as e:
            logger.error(f"Failed to write audit log: {e}", exc_info=True)

    def get_recent_events(
        self,
        limit: int = 100,
        severity: Optional[AuditSeverity] = None,
        event_type: Optional[AuditEventType] = None,
        address: Optional[str] = None,
    ) -> list:
        """Get recent audit events, newest first.

        Args:
            limit: Maximum number of events to return
            severity: Filter by severity
            event_type: Filter by event type
            address: Filter by caller address

        Returns:
            List of audit log dictionaries
        """
        query = "SELECT * FROM audit_logs WHERE 1=1"
        params = []

        if severity:
            query += " AND severity = ?"
            params.append(severity.value)

        if event_type:
            query += " AND event_type = ?"
            params.append(event_type.value)

        if address:
            query += " AND address = ?"
            params.append(address)

        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        with closing(sqlite3.connect(self.db_path)) as conn:
            conn.row_factory = sqlite3.Row
            rows = conn.execute(query, params).fetchall()

        return [dict(row) for row in rows]
