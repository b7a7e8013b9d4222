"""
SQLite database implementation.
Run history only; nothing is resumed from it.
"""

import aiosqlite
from datetime import datetime
from typing import List, Optional
import os

from .models import SyncLog, LogStatus, TriggerType


STAT_COLUMNS = (
    "products_fetched",
    "products_created",
    "products_updated",
    "products_skipped",
    "products_failed",
    "publish_warnings",
)

UPDATABLE_COLUMNS = {"finished_at", "status", "error_message", "error_details"} | set(STAT_COLUMNS)


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    # Drop timezone info to avoid naive/aware comparison issues
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None)
    return parsed


class SQLiteDatabase:
    """SQLite database for sync run history."""
    
    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None
    
    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            os.makedirs(os.path.dirname(self.db_path) or ".", exist_ok=True)
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        return self._connection
    
    async def initialize(self) -> None:
        """Create database tables."""
        conn = await self._get_connection()
        
        await conn.executescript("""
            CREATE TABLE IF NOT EXISTS sync_logs (
                id TEXT PRIMARY KEY,
                started_at TEXT NOT NULL,
                finished_at TEXT,
                status TEXT NOT NULL DEFAULT 'running',
                triggered_by TEXT NOT NULL,
                mode TEXT NOT NULL,
                products_fetched INTEGER NOT NULL DEFAULT 0,
                products_created INTEGER NOT NULL DEFAULT 0,
                products_updated INTEGER NOT NULL DEFAULT 0,
                products_skipped INTEGER NOT NULL DEFAULT 0,
                products_failed INTEGER NOT NULL DEFAULT 0,
                publish_warnings INTEGER NOT NULL DEFAULT 0,
                error_message TEXT,
                error_details TEXT
            );
            
            CREATE INDEX IF NOT EXISTS idx_sync_logs_started_at ON sync_logs(started_at DESC);
            CREATE INDEX IF NOT EXISTS idx_sync_logs_status ON sync_logs(status);
        """)
        await conn.commit()
    
    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
    
    def _row_to_log(self, row: aiosqlite.Row) -> SyncLog:
        """Convert a database row to a SyncLog model."""
        return SyncLog(
            id=row["id"],
            started_at=_parse_datetime(row["started_at"]),
            finished_at=_parse_datetime(row["finished_at"]),
            status=LogStatus(row["status"]),
            triggered_by=TriggerType(row["triggered_by"]),
            mode=row["mode"],
            error_message=row["error_message"],
            error_details=row["error_details"],
            **{column: row[column] for column in STAT_COLUMNS}
        )
    
    # ===== Log Operations =====
    
    async def get_logs(
        self,
        status: Optional[LogStatus] = None,
        triggered_by: Optional[TriggerType] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[SyncLog]:
        conn = await self._get_connection()
        
        query = "SELECT * FROM sync_logs WHERE 1=1"
        params = []
        
        if status:
            query += " AND status = ?"
            params.append(status.value)
        
        if triggered_by:
            query += " AND triggered_by = ?"
            params.append(triggered_by.value)
        
        query += " ORDER BY started_at DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        
        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()
        return [self._row_to_log(row) for row in rows]
    
    async def get_log(self, log_id: str) -> Optional[SyncLog]:
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT * FROM sync_logs WHERE id = ?", (log_id,))
        row = await cursor.fetchone()
        return self._row_to_log(row) if row else None
    
    async def get_latest_log(self) -> Optional[SyncLog]:
        logs = await self.get_logs(limit=1)
        return logs[0] if logs else None
    
    async def create_log(self, triggered_by: TriggerType, mode: str) -> SyncLog:
        log = SyncLog(triggered_by=triggered_by, mode=mode)
        
        conn = await self._get_connection()
        await conn.execute(
            """
            INSERT INTO sync_logs (id, started_at, finished_at, status, triggered_by, mode,
                                  products_fetched, products_created, products_updated,
                                  products_skipped, products_failed, publish_warnings,
                                  error_message, error_details)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                log.id, log.started_at.isoformat(), None, log.status.value,
                log.triggered_by.value, log.mode, 0, 0, 0, 0, 0, 0, None, None
            )
        )
        await conn.commit()
        return log
    
    async def update_log(self, log_id: str, **kwargs) -> Optional[SyncLog]:
        if not kwargs:
            return await self.get_log(log_id)
        
        updates = []
        values = []
        
        for key, value in kwargs.items():
            if key not in UPDATABLE_COLUMNS:
                raise ValueError(f"Unknown sync log column: {key}")
            updates.append(f"{key} = ?")
            if key == "finished_at" and isinstance(value, datetime):
                values.append(value.isoformat())
            elif key == "status" and isinstance(value, LogStatus):
                values.append(value.value)
            else:
                values.append(value)
        
        values.append(log_id)
        
        conn = await self._get_connection()
        await conn.execute(f"UPDATE sync_logs SET {', '.join(updates)} WHERE id = ?", values)
        await conn.commit()
        
        return await self.get_log(log_id)
