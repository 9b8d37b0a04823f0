"""SQLite persistence for journey maps.

A journey map is stored as one row; its steps live in a single JSON column
and are always written as a whole unit.
"""

import json
import logging
import sqlite3
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from journeymap.config import Config
from journeymap.errors import PersistenceFailed
from journeymap.models import JourneyMap, JourneyMapCreate, JourneyStep

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS journey_maps (
    id TEXT PRIMARY KEY,
    idea_id TEXT NOT NULL,
    title TEXT NOT NULL,
    subtitle TEXT,
    steps TEXT NOT NULL DEFAULT '[]',
    archetype_id TEXT,
    created_by TEXT,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now')),
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);

CREATE INDEX IF NOT EXISTS idx_journey_maps_idea ON journey_maps(idea_id, created_at);
"""

UPDATABLE_FIELDS = frozenset({"title", "subtitle", "steps", "archetype_id"})


def _steps_to_json(steps: list[JourneyStep]) -> str:
    return json.dumps([s.model_dump(by_alias=True) for s in steps])


def _row_to_map(row: sqlite3.Row) -> JourneyMap:
    data = dict(row)
    data["steps"] = json.loads(data["steps"] or "[]")
    return JourneyMap.model_validate(data)


class JourneyMapDB:
    """SQLite database wrapper for journey maps."""

    def __init__(self, config: Config) -> None:
        self.db_path = config.resolved_db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database not initialized. Call init_db() first.")
        return self._conn

    def init_db(self) -> None:
        """Create database and tables."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(SCHEMA_SQL)
        logger.info("Database initialized at %s", self.db_path)

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Connection]:
        """Run one all-or-nothing write; any sqlite error becomes PersistenceFailed."""
        try:
            yield self.conn
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            logger.error("Failed to %s journey map: %s", action, e)
            raise PersistenceFailed(f"Failed to {action} journey map: {e}") from e
        except PersistenceFailed:
            self.conn.rollback()
            raise

    # --- Write operations ---

    def create(self, data: JourneyMapCreate) -> str:
        """Insert a journey map. Returns the new map ID."""
        map_id = uuid.uuid4().hex
        with self._transaction("add") as conn:
            conn.execute(
                """INSERT INTO journey_maps
                   (id, idea_id, title, subtitle, steps, archetype_id, created_by)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    map_id,
                    data.idea_id,
                    data.title,
                    data.subtitle or None,
                    _steps_to_json(data.steps),
                    data.archetype_id,
                    data.created_by,
                ),
            )
        logger.info("Created journey map %s (%d steps)", map_id, len(data.steps))
        return map_id

    def update(self, map_id: str, **fields: Any) -> None:
        """Update title/subtitle/steps/archetype_id. Steps replace the whole collection."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise PersistenceFailed(f"Cannot update fields: {', '.join(sorted(unknown))}")

        updates = ["updated_at = strftime('%Y-%m-%dT%H:%M:%f', 'now')"]
        params: list[Any] = []
        for name in sorted(fields):
            value = fields[name]
            if name == "steps":
                value = _steps_to_json(value)
            updates.append(f"{name} = ?")
            params.append(value)
        params.append(map_id)

        with self._transaction("update") as conn:
            cursor = conn.execute(
                f"UPDATE journey_maps SET {', '.join(updates)} WHERE id = ?", params
            )
            if cursor.rowcount == 0:
                raise PersistenceFailed(f"Journey map not found: {map_id}")
        logger.info("Updated journey map %s (%s)", map_id, ", ".join(sorted(fields)) or "touch")

    def delete(self, map_id: str) -> None:
        with self._transaction("delete") as conn:
            cursor = conn.execute("DELETE FROM journey_maps WHERE id = ?", (map_id,))
            if cursor.rowcount == 0:
                raise PersistenceFailed(f"Journey map not found: {map_id}")
        logger.info("Deleted journey map %s", map_id)

    # --- Query operations ---

    def get(self, map_id: str) -> JourneyMap | None:
        row = self.conn.execute(
            "SELECT * FROM journey_maps WHERE id = ?", (map_id,)
        ).fetchone()
        if row:
            return _row_to_map(row)
        return None

    def list_by_idea_id(self, idea_id: str) -> list[JourneyMap]:
        """Journey maps for an idea, newest first."""
        rows = self.conn.execute(
            "SELECT * FROM journey_maps WHERE idea_id = ? ORDER BY created_at DESC, rowid DESC",
            (idea_id,),
        ).fetchall()
        return [_row_to_map(r) for r in rows]
