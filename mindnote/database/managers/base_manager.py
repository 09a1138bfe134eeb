#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base class for managers of user-owned rows.

Rows are owned by an (app_id, user_id) pair. Managers only ever reach rows
through owned() / get_owned(), so one user's id never resolves to another
user's row.

Writes go through _retry_on_lock(): while another connection holds the
SQLite write lock the operation is repeated a couple of times with a short,
doubling pause before the error is allowed through.

Example:
    class RecordManager(BaseManager):
        def create(self, app_id, user_id, metadata) -> RecordRow:
            row = ...
            return self._retry_on_lock(lambda: self._insert(row), "create")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from abc import ABC
from typing import Callable, Optional, Type, TypeVar

# --- Third party imports ---
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Query, Session

# --- Local imports ---
from mindnote.core.logging_manager import MindNoteLogger, safe_logger
from ..decorators import is_lock_error

T = TypeVar("T")

LOCK_ATTEMPTS = 3
LOCK_BACKOFF_SECONDS = 0.1


class BaseManager(ABC):
    """
    Base for managers working inside one session.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[MindNoteLogger] = None):
        self.session = session
        self.logger = logger

    def owned(self, model: Type[T], app_id: str, user_id: str) -> Query:
        """Query over the rows of ``model`` owned by one user."""
        return self.session.query(model).filter_by(app_id=app_id, user_id=user_id)

    def get_owned(
        self, model: Type[T], app_id: str, user_id: str, row_id: Optional[str]
    ) -> Optional[T]:
        """
        Row by primary key, only if the given user owns it.

        Returns:
            The row, or None if missing or owned by someone else
        """
        if not row_id:
            return None
        row = self.session.get(model, row_id)
        if row is None or row.app_id != app_id or row.user_id != user_id:
            return None
        return row

    def _retry_on_lock(self, operation: Callable[[], T], action: str = "write") -> T:
        """
        Run a write, repeating it while the database is locked.

        Pauses 0.1s then 0.2s between attempts. Errors other than a lock,
        and a lock still held after the last attempt, propagate.

        Args:
            operation: Callable performing the write and flush
            action: What is being written, for the log

        Returns:
            Result of the operation
        """
        attempt = 0
        while True:
            try:
                return operation()
            except OperationalError as e:
                attempt += 1
                if attempt >= LOCK_ATTEMPTS or not is_lock_error(e):
                    raise
                pause = LOCK_BACKOFF_SECONDS * 2 ** (attempt - 1)
                safe_logger(self.logger).log_warning(
                    f"Record store locked during {action}, retrying",
                    {"attempt": attempt, "pause_seconds": pause},
                )
                time.sleep(pause)
