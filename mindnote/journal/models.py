#!/usr/bin/env python3
"""
models.py
--------------------
In-memory domain types for journal records.

Types:
    - RecordKind: The four fixed record kinds with their localized labels
    - ViewMode: The three ways a collection is browsed
    - Record: One journal entry as delivered by the record store
    - Identity: Opaque user id plus guest flag

Records are plain values. The store hands out fresh Record lists on every
change; nothing in the query, aggregation or CSV layers mutates them.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

# --- Local imports ---
from mindnote.core.exceptions import RecordValidationError, ValidationError
from mindnote.core.validators import DataValidator

# Indexed by mood - 1
MOOD_EMOJI = ("😡", "😢", "😐", "🙂", "🥰")
UNKNOWN_MOOD_EMOJI = "❓"
DEFAULT_MOOD = 3


def mood_emoji(mood: Optional[int]) -> str:
    """Emoji for a mood score, or the unknown marker when absent."""
    if mood is None:
        return UNKNOWN_MOOD_EMOJI
    return MOOD_EMOJI[mood - 1]


class RecordKind(str, Enum):
    """
    Enumeration of record kinds.
    - MORNING_PAGE: Morning pages, written first thing in the day
    - BRAIN_DUMP: Free-form brain dump
    - EMOTION: Emotion log carrying a 1-5 mood score
    - RETROSPECTIVE: Keep / Problem / Try retrospective
    """

    MORNING_PAGE = "MorningPage"
    BRAIN_DUMP = "BrainDump"
    EMOTION = "Emotion"
    RETROSPECTIVE = "Retrospective"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available record kind choices."""
        return [kind.value for kind in cls]

    @classmethod
    def autosave_kinds(cls) -> List["RecordKind"]:
        """Kinds whose editing sessions autosave in the background."""
        return [cls.MORNING_PAGE, cls.BRAIN_DUMP]

    @classmethod
    def parse(cls, value: Any) -> "RecordKind":
        """
        Convert a kind value or name to a RecordKind.

        Accepts enum members, values ("BrainDump") and member names
        ("brain_dump"), case-insensitively.

        Raises:
            ValidationError: If the value names no kind
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for kind in cls:
            if text.lower() in (kind.value.lower(), kind.name.lower()):
                return kind
        raise ValidationError(
            f"Unknown record kind {value!r}. Choose one of: {', '.join(cls.choices())}"
        )

    @property
    def has_mood(self) -> bool:
        """Check if records of this kind carry a mood score."""
        return self is RecordKind.EMOTION

    @property
    def autosaves(self) -> bool:
        """Check if editing sessions of this kind autosave."""
        return self in self.autosave_kinds()

    def label(self, locale: str = "ko") -> str:
        """
        Get the localized label written to the CSV Type column.

        Args:
            locale: "ko" (default, matches existing backups) or "en"
        """
        return KIND_LABELS[locale][self]

    @property
    def display_name(self) -> str:
        """Get human-readable display name."""
        return self.label("en")


KIND_LABELS: Dict[str, Dict[RecordKind, str]] = {
    "ko": {
        RecordKind.MORNING_PAGE: "모닝 페이지",
        RecordKind.BRAIN_DUMP: "브레인 덤프",
        RecordKind.EMOTION: "감정 일지",
        RecordKind.RETROSPECTIVE: "회고",
    },
    "en": {
        RecordKind.MORNING_PAGE: "Morning Page",
        RecordKind.BRAIN_DUMP: "Brain Dump",
        RecordKind.EMOTION: "Emotion Log",
        RecordKind.RETROSPECTIVE: "Retrospective",
    },
}


class ViewMode(str, Enum):
    """Ways of browsing a record collection."""

    LIST = "list"
    CALENDAR = "calendar"
    STATS = "stats"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available view mode choices."""
        return [mode.value for mode in cls]


@dataclass(frozen=True)
class Identity:
    """
    The user a store call acts for.

    Authentication happens elsewhere; this only carries its result.

    Attributes:
        user_id: Opaque user identifier
        is_guest: Guest data lives in memory and is lost on exit
    """

    user_id: str
    is_guest: bool = False


@dataclass(frozen=True)
class Record:
    """
    A single journal entry.

    Attributes:
        id: Store-assigned identifier, immutable
        date: ISO date (YYYY-MM-DD) the entry is filed under
        kind: Record kind, fixed at creation
        title: Free text, may be empty
        content: Free text; for retrospectives the Keep/Problem/Try composite
        mood: 1-5 for Emotion records, None otherwise
        tags: Ordered tags
        created_at: Store-assigned creation timestamp
    """

    id: str
    date: str
    kind: RecordKind
    title: str = ""
    content: str = ""
    mood: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def month(self) -> str:
        """The YYYY-MM prefix of the record's date."""
        return self.date[:7]

    def to_metadata(self) -> Dict[str, Any]:
        """
        Get the user-editable fields as a partial-record dictionary.

        Returns:
            Dictionary accepted by RecordStore.create / update
        """
        return {
            "date": self.date,
            "kind": self.kind,
            "title": self.title,
            "content": self.content,
            "mood": self.mood,
            "tags": list(self.tags),
        }


RECORD_FIELDS = ("date", "kind", "title", "content", "mood", "tags")


def normalize_metadata(
    metadata: Dict[str, Any],
    existing_kind: Optional[RecordKind] = None,
    strict_mood: bool = True,
) -> Dict[str, Any]:
    """
    Validate and normalize a partial record.

    Only keys present in ``metadata`` are returned, so the result can be
    applied as an update that preserves every other field. Unknown keys are
    rejected. ``mood`` is dropped to None for kinds without a mood.

    Args:
        metadata: Partial record dictionary
        existing_kind: Kind of the record being updated, if any
        strict_mood: Raise on invalid moods instead of dropping them

    Returns:
        Normalized partial record

    Raises:
        RecordValidationError: On unknown fields or a kind change
        ValidationError: On invalid dates, kinds or moods
    """
    unknown = set(metadata) - set(RECORD_FIELDS)
    if unknown:
        raise RecordValidationError(
            f"Unknown record field(s): {', '.join(sorted(unknown))}"
        )

    normalized: Dict[str, Any] = {}

    if "kind" in metadata:
        kind = RecordKind.parse(metadata["kind"])
        if existing_kind is not None and kind is not existing_kind:
            raise RecordValidationError(
                f"Record kind cannot be changed ({existing_kind.value} -> {kind.value})"
            )
        normalized["kind"] = kind
    kind = normalized.get("kind", existing_kind)

    if "date" in metadata:
        normalized["date"] = DataValidator.normalize_date(metadata["date"])
    for key in ("title", "content"):
        if key in metadata:
            normalized[key] = DataValidator.normalize_string(metadata[key])
    if "tags" in metadata:
        normalized["tags"] = DataValidator.normalize_tags(metadata["tags"])

    if "mood" in metadata:
        mood = DataValidator.normalize_mood(metadata["mood"], strict=strict_mood)
        normalized["mood"] = mood if kind is not None and kind.has_mood else None
    elif kind is not None and not kind.has_mood and existing_kind is None:
        normalized["mood"] = None

    return normalized
