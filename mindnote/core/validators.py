#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for MindNote operations.

Provides type-safe conversion, validation, and normalization functions
used by the record store, the CSV codec and the CLI.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import ValidationError

MOOD_MIN = 1
MOOD_MAX = 5


class DataValidator:
    """Centralized data validation for record operations."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-empty.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If validation fails
        """
        for field in required_fields:
            if field not in data or not data[field]:
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def normalize_date(date_value: Any) -> str:
        """
        Normalize various date inputs to a zero-padded ISO string.

        Zero padding matters: lexicographic order of the result equals
        chronological order, which the date grouping relies on.

        Args:
            date_value: ISO date string, date object, or datetime

        Returns:
            Date as YYYY-MM-DD

        Raises:
            ValidationError: If the value is not a valid calendar date
        """
        if isinstance(date_value, datetime):
            return date_value.date().isoformat()
        if isinstance(date_value, date):
            return date_value.isoformat()
        if isinstance(date_value, str):
            try:
                return date.fromisoformat(date_value.strip()).isoformat()
            except ValueError:
                raise ValidationError(
                    f"Invalid date format: expected YYYY-MM-DD, got {date_value!r}"
                )
        raise ValidationError(f"Cannot convert {type(date_value).__name__} to date")

    @staticmethod
    def normalize_string(value: Any) -> str:
        """
        Normalize free text. None becomes the empty string.

        Args:
            value: Value to normalize

        Returns:
            String value
        """
        if value is None:
            return ""
        return str(value)

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """
        Convert value to integer safely.

        Args:
            value: Value to convert

        Returns:
            Integer value or None when the value is empty or not numeric
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return None

    @staticmethod
    def normalize_mood(value: Any, strict: bool = True) -> Optional[int]:
        """
        Normalize a mood score.

        Args:
            value: Mood as int or numeric string; empty means absent
            strict: If True, out-of-range or non-numeric values raise;
                if False they are treated as absent

        Returns:
            Mood in 1..5 or None

        Raises:
            ValidationError: In strict mode, for invalid values
        """
        if value is None or value == "":
            return None

        mood = DataValidator.normalize_int(value)
        if mood is None or not MOOD_MIN <= mood <= MOOD_MAX:
            if strict:
                raise ValidationError(
                    f"Mood must be between {MOOD_MIN} and {MOOD_MAX}, got {value!r}"
                )
            return None
        return mood

    @staticmethod
    def normalize_tags(value: Any) -> List[str]:
        """
        Normalize tags to an ordered list of strings.

        Args:
            value: None, a single string, or an iterable of strings

        Returns:
            List of tags (order preserved, empty strings dropped)
        """
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, Iterable):
            raise ValidationError(f"Tags must be a list of strings, got {value!r}")
        return [str(tag) for tag in value if str(tag) != ""]
