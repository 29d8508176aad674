"""SQLite-backed store for captured snaps."""
from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from datetime import datetime
from pathlib import Path

from pipeline.interfaces import SnapStore
from schemas import CapturedSnap

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS place_snaps (
    id TEXT PRIMARY KEY,
    image_reference TEXT NOT NULL,
    recognized_text TEXT NOT NULL,
    pinyin TEXT NOT NULL,
    latitude REAL,
    longitude REAL,
    address TEXT,
    translation TEXT NOT NULL,
    maps_link TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_place_snaps_created_at ON place_snaps(created_at);
"""

COLUMNS = (
	"id",
	"image_reference",
	"recognized_text",
	"pinyin",
	"latitude",
	"longitude",
	"address",
	"translation",
	"maps_link",
	"created_at",
)


def _row_to_snap(row: sqlite3.Row) -> CapturedSnap:
	data = {column: row[column] for column in COLUMNS}
	data["created_at"] = datetime.fromisoformat(row["created_at"])
	return CapturedSnap(**data)


class SqliteSnapStore(SnapStore):
	"""One connection per operation; each write is its own transaction."""

	def __init__(self, db_path: str | Path):
		self.db_path = Path(db_path)
		self.db_path.parent.mkdir(parents=True, exist_ok=True)
		self._logger = logging.getLogger(self.__class__.__name__)
		self.ensure_schema()

	def _connect(self) -> sqlite3.Connection:
		conn = sqlite3.connect(self.db_path)
		conn.row_factory = sqlite3.Row
		return conn

	def ensure_schema(self) -> None:
		with closing(self._connect()) as conn, conn:
			conn.executescript(SCHEMA_SQL)

	def insert(self, snap: CapturedSnap) -> None:
		values = snap.model_dump()
		values["created_at"] = snap.created_at.isoformat()
		placeholders = ", ".join("?" for _ in COLUMNS)
		with closing(self._connect()) as conn, conn:
			conn.execute(
				f"INSERT INTO place_snaps ({', '.join(COLUMNS)}) VALUES ({placeholders})",
				tuple(values[column] for column in COLUMNS),
			)
		self._logger.debug("Inserted snap %s", snap.id)

	def get(self, snap_id: str) -> CapturedSnap | None:
		with closing(self._connect()) as conn:
			row = conn.execute("SELECT * FROM place_snaps WHERE id = ?", (snap_id,)).fetchone()
		return _row_to_snap(row) if row is not None else None

	def count(self) -> int:
		with closing(self._connect()) as conn:
			return int(conn.execute("SELECT COUNT(*) FROM place_snaps").fetchone()[0])

	def delete(self, snap_id: str) -> bool:
		with closing(self._connect()) as conn, conn:
			cur = conn.execute("DELETE FROM place_snaps WHERE id = ?", (snap_id,))
		return cur.rowcount > 0

	def list_all(self) -> list[CapturedSnap]:
		with closing(self._connect()) as conn:
			rows = conn.execute("SELECT * FROM place_snaps ORDER BY created_at DESC, rowid DESC").fetchall()
		return [_row_to_snap(row) for row in rows]

	def clear(self) -> int:
		with closing(self._connect()) as conn, conn:
			cur = conn.execute("DELETE FROM place_snaps")
		return cur.rowcount
