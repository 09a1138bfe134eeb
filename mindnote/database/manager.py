#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the MindNote record store.

Provides the MindNoteDB class owning the SQLAlchemy engine and sessions.
Handles:
    - Initialization of the database engine and sessionmaker
    - Schema creation for a fresh database file
    - Transaction scopes with automatic commit / rollback
    - Logging of session lifecycle

Persistent identities use a SQLite file. Guests get a private in-memory
database that lives as long as the MindNoteDB instance.

Notes
==============
- The schema is created with ``Base.metadata.create_all``
- All datetime fields are UTC-aware
- Retry logic for SQLite lock contention lives in BaseManager
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# --- Local imports ---
from mindnote.core.exceptions import DatabaseError
from mindnote.core.logging_manager import MindNoteLogger, safe_logger
from .managers import RecordManager
from .models import Base


class MindNoteDB:
    """
    Engine and session owner for the record database.

    Attributes:
        db_path: SQLite file, or None for an in-memory database
        engine: SQLAlchemy engine instance
        SessionLocal: SQLAlchemy session factory
        logger: Optional logger

    Usage:
        db = MindNoteDB("~/.mindnote/data/mindnote.db")
        with db.session_scope() as session:
            rows = db.records.list_for("default-app-id", "alice")
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        logger: Optional[MindNoteLogger] = None,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path: Path to the SQLite file; None for an in-memory database
            logger: Optional logger for lifecycle and error events
        """
        self.db_path = Path(db_path).expanduser().resolve() if db_path else None
        self.logger = logger
        self._record_manager: Optional[RecordManager] = None
        self._setup_engine()

    @property
    def is_memory(self) -> bool:
        """True for a non-persistent in-memory database."""
        return self.db_path is None

    def _setup_engine(self) -> None:
        """Initialize database engine, session factory and schema."""
        try:
            safe_logger(self.logger).log_operation(
                "database_init_start",
                {"db_path": str(self.db_path) if self.db_path else ":memory:"},
            )

            if self.db_path is None:
                # One shared connection keeps the in-memory database alive
                self.engine: Engine = create_engine(
                    "sqlite://",
                    echo=False,
                    connect_args={"check_same_thread": False},
                    poolclass=StaticPool,
                )
            else:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self.engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    echo=False,
                    pool_pre_ping=True,
                )

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
            )

            Base.metadata.create_all(self.engine)

            safe_logger(self.logger).log_operation(
                "database_init_complete", {"success": True}
            )

        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around operations with logging.

        Commits when the block exits normally and rolls back on any
        exception, which is then re-raised. The RecordManager for the
        session is available as ``db.records`` inside the block.

        Usage:
            with db.session_scope() as session:
                row = db.records.create(app_id, user_id, metadata)
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self._record_manager = RecordManager(session, self.logger)

        safe_logger(self.logger).log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            safe_logger(self.logger).log_debug(
                "session_commit", {"session_id": session_id}
            )
        except Exception as e:
            session.rollback()
            safe_logger(self.logger).log_error(
                e, {"operation": "session_rollback", "session_id": session_id}
            )
            raise
        finally:
            self._record_manager = None
            session.close()
            safe_logger(self.logger).log_debug(
                "session_close", {"session_id": session_id}
            )

    @property
    def records(self) -> RecordManager:
        """
        Access RecordManager for record operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._record_manager is None:
            raise DatabaseError(
                "RecordManager requires active session. "
                "Use within session_scope: "
                "with db.session_scope() as session: db.records.create(...)"
            )
        return self._record_manager

    def dispose(self) -> None:
        """Release all pooled connections (drops an in-memory database)."""
        self.engine.dispose()
