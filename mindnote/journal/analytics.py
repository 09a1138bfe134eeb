#!/usr/bin/env python3
"""
analytics.py
------------------
Monthly statistics over a record collection.

For one (year, month) the report holds:
    - mood_counts: five buckets indexed mood - 1, counting Emotion records
      that carry a mood
    - dominant_mood: the first bucket reaching the highest count, so ties
      go to the lowest mood; None when the month has no mood records
    - mood_total: number of Emotion records with a mood
    - kind_counts: records per kind, every kind present even at zero
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .models import MOOD_EMOJI, Record, RecordKind, mood_emoji


def month_prefix(year: int, month: int) -> str:
    """The YYYY-MM prefix shared by every ISO date in a month."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    return f"{year:04d}-{month:02d}"


def records_in_month(records: Iterable[Record], year: int, month: int) -> List[Record]:
    """Records whose date falls in the given month."""
    prefix = month_prefix(year, month)
    return [record for record in records if record.date.startswith(prefix)]


@dataclass(frozen=True)
class MonthlyStats:
    """
    Statistics for one calendar month.

    Attributes:
        year: Calendar year
        month: Month number (1-12)
        record_count: Records in the month, all kinds
        mood_counts: Emotion records per mood, index mood - 1
        dominant_mood: Most frequent mood (lowest wins ties), None without data
        mood_total: Emotion records with a mood
        kind_counts: Records per kind
    """

    year: int
    month: int
    record_count: int = 0
    mood_counts: List[int] = field(default_factory=lambda: [0] * len(MOOD_EMOJI))
    dominant_mood: Optional[int] = None
    mood_total: int = 0
    kind_counts: Dict[RecordKind, int] = field(
        default_factory=lambda: {kind: 0 for kind in RecordKind}
    )

    @property
    def period_label(self) -> str:
        """YYYY-MM label for the month."""
        return month_prefix(self.year, self.month)

    @property
    def dominant_emoji(self) -> str:
        """Emoji for the dominant mood, or the unknown marker."""
        return mood_emoji(self.dominant_mood)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "period": self.period_label,
            "record_count": self.record_count,
            "mood_counts": list(self.mood_counts),
            "dominant_mood": self.dominant_mood,
            "mood_total": self.mood_total,
            "kind_counts": {kind.value: count for kind, count in self.kind_counts.items()},
        }


def mood_histogram(records: Iterable[Record]) -> List[int]:
    """Count Emotion records per mood bucket (index mood - 1)."""
    counts = [0] * len(MOOD_EMOJI)
    for record in records:
        if record.kind is RecordKind.EMOTION and record.mood is not None:
            counts[record.mood - 1] += 1
    return counts


def dominant_mood(counts: List[int]) -> Optional[int]:
    """
    Mood with the highest count.

    Scans from mood 1 upwards and keeps the first maximum, so a tie goes to
    the lowest mood.

    Returns:
        Mood 1-5, or None when every count is zero
    """
    if not any(counts):
        return None
    return counts.index(max(counts)) + 1


def monthly_stats(records: Iterable[Record], year: int, month: int) -> MonthlyStats:
    """
    Compute the monthly report.

    Args:
        records: Full collection (filtered to the month here)
        year: Calendar year
        month: Month number (1-12)

    Returns:
        MonthlyStats
    """
    monthly = records_in_month(records, year, month)
    counts = mood_histogram(monthly)

    kind_counts = {kind: 0 for kind in RecordKind}
    for record in monthly:
        kind_counts[record.kind] += 1

    return MonthlyStats(
        year=year,
        month=month,
        record_count=len(monthly),
        mood_counts=counts,
        dominant_mood=dominant_mood(counts),
        mood_total=sum(counts),
        kind_counts=kind_counts,
    )
