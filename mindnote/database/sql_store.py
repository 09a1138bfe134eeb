#!/usr/bin/env python3
"""
sql_store.py
--------------------
SQLAlchemy implementation of the record store.

Each write runs in its own MindNoteDB.session_scope(); subscribers are
notified only after that scope has committed. A guest store (StoreConfig
without db_path) keeps everything in a private in-memory SQLite database.

Usage:
    store = SqlRecordStore(StoreConfig(app_id="mind-notes", db_path=DB_PATH))
    sub = store.subscribe("alice", lambda records: print(len(records)))
    store.create("alice", {"date": "2024-05-01", "kind": "BrainDump"})
    sub.cancel()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional

# --- Local imports ---
from mindnote.core.logging_manager import MindNoteLogger
from mindnote.journal.models import Record
from .decorators import handle_db_errors, log_database_operation
from .manager import MindNoteDB
from .store import RecordStore, StoreConfig


class SqlRecordStore(RecordStore):
    """
    Record store backed by MindNoteDB.

    Attributes:
        db: Database manager owning engine and sessions
    """

    def __init__(
        self,
        config: StoreConfig,
        logger: Optional[MindNoteLogger] = None,
        db: Optional[MindNoteDB] = None,
    ) -> None:
        """
        Open the store.

        Args:
            config: App namespace and database location
            logger: Optional logger
            db: Existing database manager to reuse (tests, shared engines)
        """
        super().__init__(config, logger)
        self.db = db if db is not None else MindNoteDB(config.db_path, logger=logger)

    @property
    def is_persistent(self) -> bool:
        return not self.db.is_memory

    @handle_db_errors
    def snapshot(self, user_id: str) -> List[Record]:
        with self.db.session_scope():
            return [row.to_record() for row in self.db.records.list_for(self.app_id, user_id)]

    @handle_db_errors
    def get(self, user_id: str, record_id: str) -> Record:
        with self.db.session_scope():
            return self.db.records.require(self.app_id, user_id, record_id).to_record()

    @handle_db_errors
    @log_database_operation("store_create")
    def create(self, user_id: str, metadata: Dict[str, Any]) -> Record:
        with self.db.session_scope():
            record = self.db.records.create(self.app_id, user_id, metadata).to_record()
        self._publish(user_id)
        return record

    @handle_db_errors
    @log_database_operation("store_update")
    def update(self, user_id: str, record_id: str, metadata: Dict[str, Any]) -> Record:
        with self.db.session_scope():
            row = self.db.records.require(self.app_id, user_id, record_id)
            record = self.db.records.update(row, metadata).to_record()
        self._publish(user_id)
        return record

    @handle_db_errors
    @log_database_operation("store_delete")
    def delete(self, user_id: str, record_id: str) -> None:
        with self.db.session_scope():
            row = self.db.records.require(self.app_id, user_id, record_id)
            self.db.records.delete(row)
        self._publish(user_id)

    @handle_db_errors
    @log_database_operation("store_batch_create")
    def batch_create(self, user_id: str, items: List[Dict[str, Any]]) -> List[Record]:
        if not items:
            return []
        with self.db.session_scope():
            rows = self.db.records.bulk_create(self.app_id, user_id, list(items))
            records = [row.to_record() for row in rows]
        self._publish(user_id)
        return records

    @handle_db_errors
    def count(self, user_id: str) -> int:
        """Number of records a user owns."""
        with self.db.session_scope():
            return self.db.records.count(self.app_id, user_id)

    def close(self) -> None:
        super().close()
        self.db.dispose()
