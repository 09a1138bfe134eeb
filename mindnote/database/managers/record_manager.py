#!/usr/bin/env python3
"""
record_manager.py
--------------------
Manages journal record rows.

Every method takes the owning (app_id, user_id) pair and never touches rows
outside it: a record id that belongs to another user is reported exactly
like a missing one.

Key Features:
    - Create, update and hard-delete single records
    - Bulk creation inside the caller's transaction
    - Ordered listing (date descending, then creation time descending)
    - Kind is fixed at creation; updates that change it are rejected

Usage:
    record_mgr = RecordManager(session, logger)

    row = record_mgr.create("default-app-id", "alice", {
        "date": "2024-05-01",
        "kind": "Emotion",
        "mood": 4,
    })
    record_mgr.update(row, {"title": "Sunny"})
    rows = record_mgr.list_for("default-app-id", "alice")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import date
from typing import Any, Dict, List, Optional

# --- Third party imports ---
from sqlalchemy.orm import Session

# --- Local imports ---
from mindnote.core.exceptions import RecordNotFoundError
from mindnote.core.logging_manager import MindNoteLogger, safe_logger
from mindnote.core.validators import DataValidator
from mindnote.journal.models import normalize_metadata
from ..decorators import handle_db_errors, log_database_operation
from ..models import RecordRow
from .base_manager import BaseManager

REQUIRED_FIELDS = ["date", "kind"]


def _apply(row: RecordRow, values: Dict[str, Any]) -> None:
    """Copy normalized values onto a row."""
    for key, value in values.items():
        if key == "date":
            value = date.fromisoformat(value)
        elif key == "tags":
            value = list(value)
        setattr(row, key, value)


class RecordManager(BaseManager):
    """Manages RecordRow entities for one session."""

    def __init__(self, session: Session, logger: Optional[MindNoteLogger] = None):
        """
        Initialize the record manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        super().__init__(session, logger)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get(self, app_id: str, user_id: str, record_id: str) -> Optional[RecordRow]:
        """
        Get a record owned by the given user.

        Returns:
            RecordRow, or None if missing or owned by someone else
        """
        return self.get_owned(RecordRow, app_id, user_id, record_id)

    def require(self, app_id: str, user_id: str, record_id: str) -> RecordRow:
        """
        Get a record owned by the given user, or fail.

        Raises:
            RecordNotFoundError: If the user has no record with this id
        """
        row = self.get(app_id, user_id, record_id)
        if row is None:
            raise RecordNotFoundError(f"No record found with id: {record_id}")
        return row

    @handle_db_errors
    def list_for(self, app_id: str, user_id: str) -> List[RecordRow]:
        """
        All records of a user, most recent date first.

        Records on the same date are ordered newest creation first.
        """
        return (
            self.owned(RecordRow, app_id, user_id)
            .order_by(RecordRow.date.desc(), RecordRow.created_at.desc(), RecordRow.id)
            .all()
        )

    def count(self, app_id: str, user_id: str) -> int:
        """Number of records owned by a user."""
        return self.owned(RecordRow, app_id, user_id).count()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _build(self, app_id: str, user_id: str, metadata: Dict[str, Any]) -> RecordRow:
        DataValidator.validate_required_fields(metadata, REQUIRED_FIELDS)
        values = normalize_metadata(metadata)
        row = RecordRow(app_id=app_id, user_id=user_id, title="", content="", tags=[])
        _apply(row, values)
        return row

    @handle_db_errors
    @log_database_operation("create_record")
    def create(self, app_id: str, user_id: str, metadata: Dict[str, Any]) -> RecordRow:
        """
        Create a new record.

        Args:
            app_id: Deployment namespace
            user_id: Owner
            metadata: Partial record.
                Required keys:
                    - date (str | datetime.date)
                    - kind (RecordKind | str)
                Optional keys:
                    - title (str)
                    - content (str)
                    - mood (int, Emotion only)
                    - tags (List[str])

        Returns:
            The new row, flushed so id and created_at are set

        Raises:
            ValidationError: On missing or invalid fields
        """
        row = self._build(app_id, user_id, metadata)

        def _do_create():
            self.session.add(row)
            self.session.flush()
            return row

        return self._retry_on_lock(_do_create, "create")

    @handle_db_errors
    @log_database_operation("update_record")
    def update(self, row: RecordRow, metadata: Dict[str, Any]) -> RecordRow:
        """
        Update the fields listed in ``metadata``; others are preserved.

        Args:
            row: Existing row (from get / require)
            metadata: Partial record

        Returns:
            The updated row

        Raises:
            RecordValidationError: If the kind would change
            ValidationError: On invalid field values
        """
        values = normalize_metadata(metadata, existing_kind=row.kind)
        values.pop("kind", None)

        def _do_update():
            _apply(row, values)
            self.session.flush()
            return row

        return self._retry_on_lock(_do_update, "update")

    @handle_db_errors
    @log_database_operation("delete_record")
    def delete(self, row: RecordRow) -> None:
        """Permanently delete a record."""

        def _do_delete():
            self.session.delete(row)
            self.session.flush()

        self._retry_on_lock(_do_delete, "delete")
        safe_logger(self.logger).log_info(
            "Deleted record", {"record_id": row.id, "date": row.date}
        )

    @handle_db_errors
    @log_database_operation("bulk_create_records")
    def bulk_create(
        self, app_id: str, user_id: str, items: List[Dict[str, Any]]
    ) -> List[RecordRow]:
        """
        Create many records in the current transaction.

        Every item is validated before anything is added, so an invalid
        item leaves the session untouched.

        Args:
            app_id: Deployment namespace
            user_id: Owner
            items: Partial records, as for create()

        Returns:
            New rows, in input order

        Raises:
            ValidationError: If any item is invalid
        """
        rows = [self._build(app_id, user_id, metadata) for metadata in items]

        def _do_bulk_insert():
            self.session.add_all(rows)
            self.session.flush()
            return rows

        created = self._retry_on_lock(_do_bulk_insert, "bulk create")
        safe_logger(self.logger).log_operation(
            "bulk_create_batch", {"count": len(created)}
        )
        return created
