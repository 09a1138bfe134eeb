#!/usr/bin/env python3
"""
models.py
--------------------
SQLAlchemy ORM models for the MindNote record store.

Tables:
    - mind_records: One row per journal record, scoped by (app_id, user_id)

Each row is owned by exactly one (app_id, user_id) pair; every query the
store issues filters on both columns. Rows convert to immutable
mindnote.journal.models.Record values before leaving the store.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

# --- Third party ---
from sqlalchemy import JSON, CheckConstraint, Date, DateTime, Index, Integer, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# --- Local imports ---
from mindnote.journal.models import Record, RecordKind


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation.
    """

    pass


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordRow(Base):
    """
    A persisted journal record.

    Attributes:
        id: Opaque identifier (hex UUID) assigned on insert
        app_id: Deployment namespace
        user_id: Owner of the record
        date: Date the record is filed under
        kind: Record kind, never changed after insert
        title: Free text
        content: Free text
        mood: 1-5 for Emotion records, NULL otherwise
        tags: Ordered list of tag strings
        created_at: Insert timestamp
        updated_at: Last modification timestamp
    """

    __tablename__ = "mind_records"
    __table_args__ = (
        CheckConstraint(
            "mood IS NULL OR (mood >= 1 AND mood <= 5)", name="ck_record_mood_range"
        ),
        Index("ix_record_owner_date", "app_id", "user_id", "date"),
    )

    # ---- Primary fields ----
    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    app_id: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    kind: Mapped[RecordKind] = mapped_column(
        SQLEnum(RecordKind, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, default="")
    content: Mapped[str] = mapped_column(Text, default="")
    mood: Mapped[Optional[int]] = mapped_column(Integer)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)

    # ---- Timestamps ----
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    def to_record(self) -> Record:
        """Convert to the immutable domain value handed to callers."""
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            # SQLite hands timestamps back naive; they were stored as UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        return Record(
            id=self.id,
            date=self.date.isoformat(),
            kind=self.kind,
            title=self.title or "",
            content=self.content or "",
            mood=self.mood,
            tags=list(self.tags or []),
            created_at=created_at,
        )

    def __repr__(self) -> str:
        return f"<RecordRow(id={self.id}, date={self.date}, kind={self.kind.value})>"
