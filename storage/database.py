"""
Database persistence layer (DuckDB) - the durable store collaborator
"""
import json
import logging
from pathlib import Path
from typing import List

import duckdb

from config import settings

logger = logging.getLogger(__name__)


class Database:
    """
    Durable store using DuckDB. Every collection is saved whole: the rows of
    a collection are replaced in one transaction, keeping their order.
    """

    def __init__(self, db_path: str = None, enabled: bool = None):
        self.db_path = db_path or settings.DATABASE_PATH
        self.enabled = settings.USE_DATABASE if enabled is None else enabled
        self.conn = None

        if self.enabled:
            self._init_database()

    def _init_database(self):
        """Initialize database and create tables"""
        if self.db_path != ":memory:":
            # Ensure directory exists
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn = duckdb.connect(self.db_path)
        self._create_tables()

    def _create_tables(self):
        """Create database tables"""
        if not self.conn:
            return

        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS records (
                collection VARCHAR NOT NULL,
                position INTEGER NOT NULL,
                record_id VARCHAR,
                payload VARCHAR NOT NULL,
                saved_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (collection, position)
            )
        """)

    def load(self, collection: str) -> List[dict]:
        """Load a collection's records in saved order"""
        if not self.conn:
            return []

        rows = self.conn.execute(
            "SELECT payload FROM records WHERE collection = ? ORDER BY position",
            [collection],
        ).fetchall()
        return [json.loads(row[0]) for row in rows]

    def save(self, collection: str, records: List[dict]):
        """Overwrite a collection with the given records"""
        if not self.conn:
            return

        rows = [
            (collection, position, record.get('id'), json.dumps(record, default=str))
            for position, record in enumerate(records)
        ]

        self.conn.begin()
        try:
            self.conn.execute("DELETE FROM records WHERE collection = ?", [collection])
            if rows:
                self.conn.executemany(
                    "INSERT INTO records (collection, position, record_id, payload) VALUES (?, ?, ?, ?)",
                    rows,
                )
            self.conn.commit()
        except duckdb.Error:
            self.conn.rollback()
            raise

        logger.debug(f"Saved {len(rows)} {collection} records to {self.db_path}")

    def collections(self) -> List[str]:
        """Names of the collections that have saved records"""
        if not self.conn:
            return []
        rows = self.conn.execute("SELECT DISTINCT collection FROM records ORDER BY collection").fetchall()
        return [row[0] for row in rows]

    def close(self):
        """Close database connection"""
        if self.conn:
            self.conn.close()
            self.conn = None
