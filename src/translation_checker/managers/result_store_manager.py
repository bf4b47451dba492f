# src/translation_checker/managers/result_store_manager.py
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from translation_checker.managers.database_manager import DatabaseManager
from translation_checker.model import Defect, DestinationRecord

logger = logging.getLogger(__name__)


class ResultStoreManager:
    """
    Run-wide store of the latest scan result per destination.

    Acts as a translation layer between the tracker/report (which work with
    DestinationRecord objects) and the 'dumb' DatabaseManager (raw SQL). The
    SQLite file outlives any single test module, so results written by the
    functional tests are visible to the validation pass at the end of the run,
    even when that pass runs in another process.

    Contract: writers finish before the report reads. There is no locking beyond
    SQLite's own; run ordering provides the barrier.
    """

    TABLE = "translation_results"

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            self.db.init_schema()
            self._schema_ready = True

    def put(self, url: str, errors: List[Defect], test_context: str = "") -> None:
        """
        Stores the scan result for `url`, replacing any earlier one (last write wins).
        """
        self._ensure_schema()
        payload = json.dumps([e.model_dump(mode="json", by_alias=True) for e in errors])
        sql = (
            f"INSERT OR REPLACE INTO {self.TABLE} "
            "(url, test_context, errors, error_count, scanned_at) VALUES (?, ?, ?, ?, ?)"
        )
        self.db.execute_query(
            sql,
            (url, test_context, payload, len(errors), datetime.now(timezone.utc).isoformat())
        )
        logger.debug("Stored %d translation issue(s) for %s", len(errors), url)

    def get_all(self) -> List[DestinationRecord]:
        """Returns a snapshot of every stored destination record."""
        self._ensure_schema()
        rows = self.db.fetch_all(
            f"SELECT url, test_context, errors, scanned_at FROM {self.TABLE} ORDER BY url"
        )
        records = []
        for url, ctx, errors, scanned_at in rows:
            try:
                records.append(
                    DestinationRecord(url=url, test_context=ctx or "", errors=errors, scanned_at=scanned_at)
                )
            except ValidationError as e:
                logger.error(f"Corrupt translation result for {url}: {e}")
                raise
        return records

    def get(self, url: str) -> Optional[DestinationRecord]:
        self._ensure_schema()
        row = self.db.fetch_one(
            f"SELECT url, test_context, errors, scanned_at FROM {self.TABLE} WHERE url = ?",
            (url,)
        )
        if not row:
            return None
        url, ctx, errors, scanned_at = row
        return DestinationRecord(url=url, test_context=ctx or "", errors=errors, scanned_at=scanned_at)

    def count(self) -> int:
        self._ensure_schema()
        row = self.db.fetch_one(f"SELECT COUNT(*) FROM {self.TABLE}")
        return int(row[0]) if row else 0

    def clear(self) -> None:
        """Removes every record. Only called as an explicit reset."""
        self._ensure_schema()
        self.db.clear_tables([self.TABLE])
        logger.info("Translation results cleared (%s)", self.db.db_path)
