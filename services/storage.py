from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Protocol

from config import settings
from models import MonitoringRecord

logger = logging.getLogger(__name__)
DEFAULT_PAGE_SIZE = 100


class RecordStore(Protocol):
    """Key-value capability the check engine relies on.

    Each call is atomic for its own key; nothing spans several keys.
    """

    def get(self, key: str) -> MonitoringRecord | None: ...

    def put(self, record: MonitoringRecord) -> None: ...

    def update(self, record: MonitoringRecord) -> bool: ...

    def delete(self, key: str) -> bool: ...

    def iter_records(self, page_size: int = DEFAULT_PAGE_SIZE) -> Iterator[MonitoringRecord]: ...


class RecordRepository:
    """sqlite-backed store mapping a URL fingerprint to its record JSON."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or settings.DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        connection = sqlite3.connect(self.db_path, timeout=5, check_same_thread=False)
        try:
            with connection:
                yield connection
        finally:
            connection.close()

    def _initialize(self) -> None:
        with self._connect() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS records (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            connection.commit()

    @staticmethod
    def _decode(key: str, raw: str) -> MonitoringRecord | None:
        try:
            return MonitoringRecord.from_dict(json.loads(raw), key=key)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning("Skipping unreadable record %s", key)
            return None

    def get(self, key: str) -> MonitoringRecord | None:
        with self._connect() as connection:
            row = connection.execute(
                "SELECT value FROM records WHERE key = ?",
                (key,),
            ).fetchone()
        if row is None:
            return None
        return self._decode(key, row[0])

    def put(self, record: MonitoringRecord) -> None:
        value = json.dumps(record.to_dict(), ensure_ascii=False)
        with self._connect() as connection:
            connection.execute(
                "INSERT OR REPLACE INTO records (key, value) VALUES (?, ?)",
                (record.key, value),
            )
            connection.commit()

    def delete(self, key: str) -> bool:
        with self._connect() as connection:
            cursor = connection.execute("DELETE FROM records WHERE key = ?", (key,))
            connection.commit()
            removed = cursor.rowcount > 0
        return removed

    def update(self, record: MonitoringRecord) -> bool:
        """Overwrite an existing record; never recreate one.

        The write only applies while the stored row still belongs to the
        same creation (matching ``added_at``), so a record deleted or re-added
        after it was read is left alone. Returns whether a row was written.
        """
        value = json.dumps(record.to_dict(), ensure_ascii=False)
        with self._connect() as connection:
            cursor = connection.execute(
                """
                UPDATE records SET value = ?
                WHERE key = ? AND json_extract(value, '$.added_at') = ?
                """,
                (value, record.key, record.added_at.isoformat()),
            )
            connection.commit()
            updated = cursor.rowcount > 0
        return updated

    def count(self) -> int:
        with self._connect() as connection:
            return connection.execute("SELECT COUNT(1) FROM records").fetchone()[0]

    def list_keys(
        self, cursor: str | None = None, limit: int = DEFAULT_PAGE_SIZE
    ) -> tuple[list[str], str | None]:
        """Return one page of keys and the cursor of the next page.

        The cursor is the last key of the page; ``None`` means no more pages.
        """
        if limit <= 0:
            raise ValueError("limit must be positive")

        query = "SELECT key FROM records"
        parameters: list[object] = []
        if cursor is not None:
            query += " WHERE key > ?"
            parameters.append(cursor)
        query += " ORDER BY key ASC LIMIT ?"
        parameters.append(limit)

        with self._connect() as connection:
            rows = connection.execute(query, parameters).fetchall()

        keys = [row[0] for row in rows]
        next_cursor = keys[-1] if len(keys) == limit else None
        return keys, next_cursor

    def iter_records(self, page_size: int = DEFAULT_PAGE_SIZE) -> Iterator[MonitoringRecord]:
        """Yield every stored record, page by page.

        A key deleted between listing and reading is skipped.
        """
        cursor: str | None = None
        while True:
            keys, cursor = self.list_keys(cursor, page_size)
            for key in keys:
                record = self.get(key)
                if record is not None:
                    yield record
            if cursor is None:
                return

    def list_records(self) -> list[MonitoringRecord]:
        return list(self.iter_records())

    def clear(self) -> None:
        with self._connect() as connection:
            connection.execute("DELETE FROM records")
            connection.commit()


__all__ = ["DEFAULT_PAGE_SIZE", "RecordRepository", "RecordStore"]
