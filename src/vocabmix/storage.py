import logging
from typing import Optional

from .config import settings
from .database import get_db_connection
from .quiz import dump_pairs
from .vocabulary import DEFAULT_WORDS

logger = logging.getLogger(__name__)


class SQLiteKeyValueStore:
    """String key-value store on the `kv` table (see database.init_db)."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def get(self, key: str) -> Optional[str]:
        conn = get_db_connection(self.db_path)
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = get_db_connection(self.db_path)
        with conn:
            conn.execute(
                """
                INSERT INTO kv (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
        conn.close()


class InputStore:
    """Keeps the raw editor text between runs."""

    def __init__(self, store: SQLiteKeyValueStore, key: str = settings.INPUT_STORE_KEY):
        self.store = store
        self.key = key

    def load(self) -> str:
        raw = self.store.get(self.key)
        if raw is None:
            logger.info("No stored input, using the default word list.")
            return dump_pairs(DEFAULT_WORDS)
        return raw

    def save(self, raw_input: str) -> None:
        self.store.set(self.key, raw_input)
