#!/usr/bin/env python3
"""
MindNote Journal Package
------------------------
Pure domain logic over record collections.

Nothing here touches storage: the record store delivers snapshots, and
these modules project, serialize and aggregate them.
"""

from .models import (
    DEFAULT_MOOD,
    MOOD_EMOJI,
    Identity,
    Record,
    RecordKind,
    ViewMode,
    mood_emoji,
)
from .csv_codec import ParseResult, export_records, parse_records
from .query import FilterSpec, filter_records, group_by_date, sorted_dates
from .analytics import MonthlyStats, monthly_stats
from .editing import EditingSession

__all__ = [
    # Types
    "Identity",
    "Record",
    "RecordKind",
    "ViewMode",
    "DEFAULT_MOOD",
    "MOOD_EMOJI",
    "mood_emoji",
    # CSV
    "ParseResult",
    "export_records",
    "parse_records",
    # Queries
    "FilterSpec",
    "filter_records",
    "group_by_date",
    "sorted_dates",
    "MonthlyStats",
    "monthly_stats",
    # Editing
    "EditingSession",
]
