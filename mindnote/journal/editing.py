#!/usr/bin/env python3
"""
editing.py
--------------------
Editing sessions with debounced background autosave.

An EditingSession holds the draft of one record while it is being written.
For morning pages and brain dumps that already exist in the store, every
edit (re)arms a single autosave timer; when the writer pauses for
``autosave_delay`` seconds the draft is written back. A newer edit cancels
the pending timer, so only the latest draft is ever autosaved.

Timers are asyncio tasks and need a running event loop. Outside a loop,
edits are only kept in the draft until save() is called.

The autosave write runs synchronously on the event loop thread, like save(),
so it never overlaps a save() and subscriber callbacks run on that thread.
The store is expected to be a local SQLite file or the in-memory guest store.

Usage:
    async def write(store, identity, record):
        with EditingSession(store, identity, record) as session:
            session.edit(content="Today I woke up early")
            await asyncio.sleep(5)   # autosave fires after 3 seconds
            session.save()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Dict, List, Optional

# --- Local imports ---
from mindnote.core.exceptions import DatabaseError, RecordValidationError, ValidationError
from mindnote.core.logging_manager import MindNoteLogger, safe_logger
from .models import DEFAULT_MOOD, Identity, Record, RecordKind
from .retrospective import RetrospectiveSections, compose, split

if TYPE_CHECKING:
    from mindnote.database.store import RecordStore

DEFAULT_AUTOSAVE_DELAY = 3.0

DRAFT_FIELDS = ("date", "title", "content", "mood", "tags", "keep", "problem", "try_")


@dataclass
class Draft:
    """
    Unsaved state of the record being edited.

    For retrospectives, ``keep``/``problem``/``try_`` are the editable
    parts and ``content`` is derived from them when saving.
    """

    date: str
    title: str = ""
    content: str = ""
    mood: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    keep: str = ""
    problem: str = ""
    try_: str = ""

    @property
    def sections(self) -> RetrospectiveSections:
        return RetrospectiveSections(keep=self.keep, problem=self.problem, try_=self.try_)


class EditingSession:
    """
    Draft plus autosave timer for a single record.

    Attributes:
        store: Record store the draft is saved to
        identity: User the record belongs to
        record: Last saved version, None until the first save of a new record
        kind: Record kind, fixed for the session
        draft: Current unsaved values
        autosave_delay: Seconds of inactivity before autosave
        last_error: Error of the most recent failed autosave, if any
    """

    def __init__(
        self,
        store: "RecordStore",
        identity: Identity,
        record: Optional[Record] = None,
        kind: RecordKind = RecordKind.MORNING_PAGE,
        autosave_delay: float = DEFAULT_AUTOSAVE_DELAY,
        logger: Optional[MindNoteLogger] = None,
    ) -> None:
        """
        Start editing an existing record, or a new one of ``kind``.

        Args:
            store: Record store
            identity: User the record belongs to
            record: Existing record to edit, or None for a new one
            kind: Kind of a new record (ignored when ``record`` is given)
            autosave_delay: Seconds of inactivity before autosave
            logger: Optional logger for autosave outcomes
        """
        self.store = store
        self.identity = identity
        self.record = record
        self.kind = record.kind if record is not None else RecordKind.parse(kind)
        self.autosave_delay = autosave_delay
        self.logger = logger
        self.last_error: Optional[Exception] = None
        self._pending: Optional[asyncio.Task] = None

        if record is not None:
            self.draft = Draft(
                date=record.date,
                title=record.title,
                content=record.content,
                mood=record.mood,
                tags=list(record.tags),
            )
            if self.kind is RecordKind.RETROSPECTIVE:
                sections = split(record.content)
                self.draft.keep = sections.keep
                self.draft.problem = sections.problem
                self.draft.try_ = sections.try_
        else:
            self.draft = Draft(
                date=date.today().isoformat(),
                mood=DEFAULT_MOOD if self.kind.has_mood else None,
            )

    # ---- Context manager ----

    def __enter__(self) -> "EditingSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---- State ----

    @property
    def is_new(self) -> bool:
        """True until the record has been saved once."""
        return self.record is None

    @property
    def has_pending_autosave(self) -> bool:
        """True while an autosave timer is armed."""
        return self._pending is not None and not self._pending.done()

    @property
    def content(self) -> str:
        """Content as it would be saved."""
        if self.kind is RecordKind.RETROSPECTIVE:
            return compose(self.draft.sections)
        return self.draft.content

    def has_content(self) -> bool:
        """Check if the draft holds anything worth saving."""
        if self.kind is RecordKind.RETROSPECTIVE:
            return self.draft.sections.has_content
        return bool(self.draft.content)

    def metadata(self) -> Dict[str, Any]:
        """Partial record built from the draft."""
        return {
            "date": self.draft.date,
            "kind": self.kind,
            "title": self.draft.title,
            "content": self.content,
            "mood": self.draft.mood if self.kind.has_mood else None,
            "tags": list(self.draft.tags),
        }

    # ---- Editing ----

    def edit(self, **fields: Any) -> None:
        """
        Update draft fields and re-arm the autosave timer.

        Args:
            **fields: Any of date, title, content, mood, tags, keep,
                problem, try_ (and kind, which must not change)

        Raises:
            RecordValidationError: If the kind would change
            ValidationError: On unknown fields
        """
        if "kind" in fields:
            kind = RecordKind.parse(fields.pop("kind"))
            if kind is not self.kind:
                raise RecordValidationError(
                    f"Record kind cannot be changed ({self.kind.value} -> {kind.value})"
                )

        unknown = set(fields) - set(DRAFT_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown draft field(s): {', '.join(sorted(unknown))}")

        for name, value in fields.items():
            setattr(self.draft, name, value)

        self._schedule_autosave()

    def _should_autosave(self) -> bool:
        return self.record is not None and self.kind.autosaves and self.has_content()

    def _schedule_autosave(self) -> None:
        self._cancel_pending()
        if not self._should_autosave():
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            safe_logger(self.logger).log_debug(
                "No running event loop, autosave not scheduled",
                {"record_id": self.record.id},
            )
            return

        self._pending = loop.create_task(self._autosave_after_delay())

    async def _autosave_after_delay(self) -> None:
        """Wait out the debounce delay, then write the draft on the loop thread."""
        try:
            await asyncio.sleep(self.autosave_delay)
        except asyncio.CancelledError:
            return

        try:
            self._write()
            self.last_error = None
            safe_logger(self.logger).log_operation(
                "autosave", {"record_id": self.record.id}
            )
        except (DatabaseError, ValidationError) as e:
            self.last_error = e
            safe_logger(self.logger).log_error(
                e, {"operation": "autosave", "record_id": self.record.id}
            )
        finally:
            if self._pending is asyncio.current_task():
                self._pending = None

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    # ---- Saving ----

    def _write(self) -> Record:
        if self.record is None:
            self.record = self.store.create(self.identity.user_id, self.metadata())
        else:
            self.record = self.store.update(
                self.identity.user_id, self.record.id, self.metadata()
            )
        return self.record

    def save(self) -> Record:
        """
        Create or update the record now.

        Cancels any pending autosave first, so the draft is written once.

        Returns:
            The saved record

        Raises:
            StoreError: If the store rejects the write
            ValidationError: If the draft is invalid
        """
        self._cancel_pending()
        return self._write()

    def close(self) -> None:
        """Discard any pending autosave."""
        self._cancel_pending()
