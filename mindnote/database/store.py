#!/usr/bin/env python3
"""
store.py
--------------------
Record store interface.

A RecordStore owns the records of every user in one app namespace and
pushes ordered snapshots to subscribers:

    - subscribe() delivers the current snapshot immediately, then a fresh
      snapshot after every successful write for that user
    - snapshots are ordered by date descending, then creation time descending
    - a failed write raises and publishes nothing, so every subscriber
      keeps the last successful snapshot
    - batch_create() is all-or-nothing

Subscriber bookkeeping lives here; concrete stores implement the reads
and writes and call ``_publish`` after each commit.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

# --- Local imports ---
from mindnote.core.config import DEFAULT_APP_ID, MindNoteConfig
from mindnote.core.exceptions import DatabaseError
from mindnote.core.logging_manager import MindNoteLogger, safe_logger
from mindnote.journal.models import Record

SnapshotCallback = Callable[[List[Record]], None]


@dataclass(frozen=True)
class StoreConfig:
    """
    Settings a store is constructed with.

    Attributes:
        app_id: Namespace isolating one deployment's records
        db_path: SQLite file, or None for a non-persistent in-memory store
    """

    app_id: str = DEFAULT_APP_ID
    db_path: Optional[Path] = None

    @classmethod
    def from_config(cls, config: MindNoteConfig) -> "StoreConfig":
        """Derive store settings; guests never get a database file."""
        return cls(
            app_id=config.app_id,
            db_path=None if config.is_guest else config.db_path,
        )


class Subscription:
    """Handle returned by RecordStore.subscribe()."""

    def __init__(self, store: "RecordStore", user_id: str, callback: SnapshotCallback):
        self.store = store
        self.user_id = user_id
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        """Stop delivering snapshots. Safe to call more than once."""
        if self.active:
            self.active = False
            self.store._unsubscribe(self)


class RecordStore(ABC):
    """
    Abstract record store bound to one app namespace.

    Attributes:
        config: StoreConfig the store was built with
        logger: Optional logger
    """

    def __init__(self, config: StoreConfig, logger: Optional[MindNoteLogger] = None):
        self.config = config
        self.logger = logger
        self._subscriptions: Dict[str, List[Subscription]] = {}

    @property
    def app_id(self) -> str:
        return self.config.app_id

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, user_id: str, callback: SnapshotCallback) -> Subscription:
        """
        Register a snapshot callback for a user.

        The callback runs once right away with the current snapshot.

        Args:
            user_id: Whose records to watch
            callback: Receives the full ordered record list

        Returns:
            Subscription; call cancel() to stop delivery
        """
        subscription = Subscription(self, user_id, callback)
        self._subscriptions.setdefault(user_id, []).append(subscription)
        self._deliver(subscription, self.snapshot(user_id))
        return subscription

    def _unsubscribe(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions.get(subscription.user_id, [])
        if subscription in subscribers:
            subscribers.remove(subscription)
        if not subscribers:
            self._subscriptions.pop(subscription.user_id, None)

    def subscriber_count(self, user_id: str) -> int:
        """Active subscriptions for a user."""
        return len(self._subscriptions.get(user_id, []))

    def _deliver(self, subscription: Subscription, records: List[Record]) -> None:
        try:
            subscription.callback(list(records))
        except Exception as e:
            # A failing subscriber must not stop delivery to the others
            safe_logger(self.logger).log_error(
                e, {"operation": "deliver_snapshot", "user_id": subscription.user_id}
            )

    def _publish(self, user_id: str) -> None:
        """
        Send a fresh snapshot to every subscriber of a user.

        Runs after the write committed. If the snapshot cannot be read the
        failure is logged and subscribers keep their previous snapshot; the
        write itself still succeeds.
        """
        subscribers = list(self._subscriptions.get(user_id, []))
        if not subscribers:
            return
        try:
            records = self.snapshot(user_id)
        except DatabaseError as e:
            safe_logger(self.logger).log_error(
                e, {"operation": "publish_snapshot", "user_id": user_id}
            )
            return
        for subscription in subscribers:
            if subscription.active:
                self._deliver(subscription, records)

    # -------------------------------------------------------------------------
    # Reads and writes
    # -------------------------------------------------------------------------

    @abstractmethod
    def snapshot(self, user_id: str) -> List[Record]:
        """All records of a user in snapshot order."""

    @abstractmethod
    def get(self, user_id: str, record_id: str) -> Record:
        """
        One record of a user.

        Raises:
            RecordNotFoundError: If the user has no such record
        """

    @abstractmethod
    def create(self, user_id: str, metadata: Dict[str, Any]) -> Record:
        """
        Create a record; the store assigns id and created_at.

        Raises:
            ValidationError: On missing or invalid fields
            StoreError: If the write fails
        """

    @abstractmethod
    def update(self, user_id: str, record_id: str, metadata: Dict[str, Any]) -> Record:
        """
        Replace the listed fields of a record and keep the rest.

        Raises:
            RecordNotFoundError: If the user has no such record
            RecordValidationError: If the kind would change
            StoreError: If the write fails
        """

    @abstractmethod
    def delete(self, user_id: str, record_id: str) -> None:
        """
        Permanently delete a record.

        Raises:
            RecordNotFoundError: If the user has no such record
            StoreError: If the write fails
        """

    @abstractmethod
    def batch_create(self, user_id: str, items: List[Dict[str, Any]]) -> List[Record]:
        """
        Create several records in one all-or-nothing transaction.

        Raises:
            ValidationError: If any item is invalid (nothing is written)
            StoreError: If the write fails (nothing is written)
        """

    def close(self) -> None:
        """Drop every subscription and release resources."""
        self._subscriptions.clear()
