#!/usr/bin/env python3
"""
managers package
--------------------
Entity managers for the MindNote database.

Each manager handles CRUD operations for a specific entity type and
inherits from BaseManager.

Available Managers:
    BaseManager: Abstract base class with common utilities
    RecordManager: Manages journal records

Usage:
    from mindnote.database.managers import RecordManager

    record_mgr = RecordManager(session, logger)
"""
from .base_manager import BaseManager
from .record_manager import RecordManager

__all__ = [
    "BaseManager",
    "RecordManager",
]
