#!/usr/bin/env python3
"""
Image Parameters Store
Writes scanned image records into images.files, leaving rows whose filename
already exists untouched.
"""

import sqlite3
from dataclasses import dataclass
from typing import List, Optional, Sequence

from db_config import SCHEMA_NAME, DatabaseConfig, connect
from scan_images import ImageRecord

TABLE_NAME = f"{SCHEMA_NAME}.files"
PARAMS_PER_ROW = 2
# SQLite builds older than 3.32 allow only 999 bound parameters per statement
LEGACY_VARIABLE_LIMIT = 999
# upper bound on rows per statement; the connection limit can lower it
DEFAULT_BATCH_SIZE = 5000


@dataclass(frozen=True)
class PersistResult:
    success: bool
    attempted: int = 0
    inserted: int = 0
    error: Optional[str] = None

    @property
    def ignored(self) -> int:
        return self.attempted - self.inserted if self.success else 0


def build_insert_sql(row_count: int) -> str:
    """Build a multi-row insert that ignores filename conflicts."""
    if row_count < 1:
        raise ValueError("Cannot build an insert statement for zero rows")
    placeholders = ", ".join(["(?, ?)"] * row_count)
    return (
        f"INSERT INTO {TABLE_NAME} (filename, parameters) "
        f"VALUES {placeholders} "
        "ON CONFLICT (filename) DO NOTHING"
    )


def max_rows_per_statement(conn) -> int:
    """Rows that fit in one insert under the connection's bound-parameter limit."""
    getlimit = getattr(conn, "getlimit", None)
    if getlimit is None:
        variable_limit = LEGACY_VARIABLE_LIMIT
    else:
        variable_limit = getlimit(sqlite3.SQLITE_LIMIT_VARIABLE_NUMBER)
    return max(1, variable_limit // PARAMS_PER_ROW)


class ImageStore:
    def __init__(self, config: DatabaseConfig, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.config = config
        self.batch_size = batch_size

    def persist(self, records: Sequence[ImageRecord]) -> PersistResult:
        """Insert records in a single transaction.

        An empty sequence is a no-op. Database errors are returned in the
        result rather than raised; nothing from a failed call is committed.
        """
        records = list(records)
        if not records:
            return PersistResult(success=True)

        conn = None
        try:
            conn = connect(self.config)
            with conn:
                inserted = 0
                rows = min(self.batch_size, max_rows_per_statement(conn))
                for batch in self._batches(records, rows):
                    values: List[str] = []
                    for record in batch:
                        values.extend((record.filename, record.parameters))
                    cursor = conn.execute(build_insert_sql(len(batch)), values)
                    inserted += cursor.rowcount
        except sqlite3.Error as e:
            print(f"✗ Failed to store {len(records)} images: {e}")
            return PersistResult(success=False, attempted=len(records), error=str(e))
        finally:
            if conn is not None:
                conn.close()

        return PersistResult(success=True, attempted=len(records), inserted=inserted)

    def _batches(self, records: List[ImageRecord], size: int):
        for start in range(0, len(records), size):
            yield records[start:start + size]

    def count(self) -> int:
        """Number of rows currently stored."""
        conn = connect(self.config)
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()[0]
        finally:
            conn.close()

