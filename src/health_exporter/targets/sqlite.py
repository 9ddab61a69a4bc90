"""
SQLite Target — Exports records to a SQLite database.

Creates a 'records' table keyed by stage and record uuid. The full record
is stored as a JSON payload so every stage shares one schema. All rows of a
run live in one transaction that is rolled back when the run fails.
"""

import json
import logging
import sqlite3
from pathlib import Path

from health_exporter.targets.base import FileTarget

logger = logging.getLogger(__name__)


CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS records (
    stage TEXT NOT NULL,
    uuid TEXT NOT NULL,
    category TEXT,
    start_date TEXT,
    end_date TEXT,
    payload TEXT NOT NULL,
    PRIMARY KEY (stage, uuid)
)
"""

INSERT_SQL = """
INSERT OR REPLACE INTO records
(stage, uuid, category, start_date, end_date, payload)
VALUES (?, ?, ?, ?, ?, ?)
"""


class SQLiteTarget(FileTarget):
    """
    Exports record dicts to a SQLite database.

    Records without a uuid (metadata, user data) are keyed by their
    position within the stage.
    """

    def __init__(self, db_path: Path):
        super().__init__(db_path)
        self.conn: sqlite3.Connection | None = None
        self._positions: dict[str, int] = {}

    async def _open(self) -> None:
        self.conn = sqlite3.connect(str(self.path))
        self.conn.execute(CREATE_TABLE_SQL)
        self.conn.commit()
        self._positions = {}

    async def _write(self, stage_name: str, records: list[dict]) -> None:
        rows = []
        for record in records:
            position = self._positions.get(stage_name, 0)
            self._positions[stage_name] = position + 1
            rows.append(
                (
                    stage_name,
                    record.get("uuid") or f"{stage_name}:{position}",
                    record.get("category"),
                    record.get("sdate"),
                    record.get("edate"),
                    json.dumps(record),
                )
            )
        self.conn.executemany(INSERT_SQL, rows)

    async def _close(self, commit: bool) -> None:
        """Commit (or roll back) the run's rows and close the connection."""
        try:
            if commit:
                self.conn.commit()
            else:
                self.conn.rollback()
        finally:
            self.conn.close()
            self.conn = None
