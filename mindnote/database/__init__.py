#!/usr/bin/env python3
"""
MindNote Database Package
-------------------------
Record storage for MindNote.

This package provides:
- The RecordStore interface and its SQLAlchemy implementation
- Engine and session management
- Entity managers with lock-retry logic
- CSV backup and restore
"""

from .manager import MindNoteDB
from mindnote.core.exceptions import (
    CsvImportError,
    DatabaseError,
    ExportError,
    RecordNotFoundError,
    StoreError,
    ValidationError,
)
from .store import RecordStore, StoreConfig, Subscription
from .sql_store import SqlRecordStore
from .export_manager import ExportManager, ImportResult, ImportStatus
from .decorators import log_database_operation, handle_db_errors

__version__ = "1.0.0"

__all__ = [
    # Main manager
    "MindNoteDB",
    # Stores
    "RecordStore",
    "SqlRecordStore",
    "StoreConfig",
    "Subscription",
    # Exceptions
    "DatabaseError",
    "StoreError",
    "RecordNotFoundError",
    "ExportError",
    "CsvImportError",
    "ValidationError",
    # Backup
    "ExportManager",
    "ImportResult",
    "ImportStatus",
    # Decorators
    "log_database_operation",
    "handle_db_errors",
]
