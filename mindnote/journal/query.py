#!/usr/bin/env python3
"""
query.py
--------------------
Filtering and grouping of an in-memory record collection.

All functions are pure projections over a snapshot delivered by the record
store: they return new lists and never mutate the records passed in.

Usage:
    spec = FilterSpec(search_term="coffee", kind=RecordKind.EMOTION)
    visible = filter_records(records, spec)
    groups = group_by_date(visible)
    for day in sorted_dates(groups):
        print(day, len(groups[day]))
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .models import Record, RecordKind, ViewMode


@dataclass(frozen=True)
class FilterSpec:
    """
    What a list or calendar view shows.

    Attributes:
        search_term: Case-insensitive substring of title or content; empty matches all
        kind: Only this kind, or None for all kinds
        active_date: Only this ISO date, or None for all dates
    """

    search_term: str = ""
    kind: Optional[RecordKind] = None
    active_date: Optional[str] = None

    @classmethod
    def for_view(
        cls,
        view_mode: ViewMode,
        search_term: str = "",
        kind: Optional[RecordKind] = None,
        selected_date: Optional[str] = None,
    ) -> "FilterSpec":
        """
        Build the filter a view applies.

        A selected date only narrows the calendar view; list and stats views
        ignore it.
        """
        active_date = selected_date if view_mode is ViewMode.CALENDAR else None
        return cls(search_term=search_term, kind=kind, active_date=active_date)

    def matches(self, record: Record) -> bool:
        """Check a single record against every criterion."""
        term = self.search_term.lower()
        if term and term not in record.title.lower() and term not in record.content.lower():
            return False
        if self.kind is not None and record.kind is not self.kind:
            return False
        if self.active_date is not None and record.date != self.active_date:
            return False
        return True


def filter_records(records: Iterable[Record], spec: FilterSpec) -> List[Record]:
    """
    Select the records a view shows, keeping their order.

    Args:
        records: Full collection
        spec: Filter criteria

    Returns:
        New list of matching records
    """
    return [record for record in records if spec.matches(record)]


def group_by_date(records: Iterable[Record]) -> Dict[str, List[Record]]:
    """
    Group records by date.

    Within each group records keep the order in which they were encountered.

    Args:
        records: Records, usually already filtered

    Returns:
        Mapping of ISO date to records on that date
    """
    groups: Dict[str, List[Record]] = {}
    for record in records:
        groups.setdefault(record.date, []).append(record)
    return groups


def sorted_dates(groups: Dict[str, List[Record]]) -> List[str]:
    """
    Most-recent-first date keys.

    ISO dates are zero padded, so plain string order is chronological.
    """
    return sorted(groups, reverse=True)


def records_on(records: Iterable[Record], day: str) -> List[Record]:
    """Records filed under one ISO date."""
    return [record for record in records if record.date == day]
