"""
MindNote
========

A personal journaling core: dated entries of four kinds (morning pages,
brain dumps, emotion logs, retrospectives), browsed by list, calendar and
monthly statistics, and backed up to CSV.

Main Components:
    - journal: Record types, CSV codec, filtering, statistics, calendar
      arithmetic and editing sessions with autosave
    - database: SQLAlchemy-backed record store, CSV export/import manager
    - core: Logging, exceptions, validation, paths and configuration
    - cli: The `mindnote` command

Example Usage:
    >>> from mindnote.core.config import load_config
    >>> from mindnote.database import SqlRecordStore, StoreConfig
    >>> store = SqlRecordStore(StoreConfig.from_config(load_config()))
    >>> store.create("alice", {"kind": "Emotion", "date": "2024-05-01", "mood": 4})
"""

__version__ = "1.0.0"
