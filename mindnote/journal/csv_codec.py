#!/usr/bin/env python3
"""
csv_codec.py
--------------------
CSV backup format for journal records.

Format:
    ID,Date,Type,Title,Content,Mood,Tags
    <id>,<YYYY-MM-DD>,<localized type label>,"<title>","<content>",<1-5 or empty>,<tag1,tag2,...>

Export rules:
    - The document starts with a UTF-8 byte-order mark; rows end with "\\n"
    - Title and Content are always quoted, inner quotes doubled
    - Mood is empty when absent
    - Tags are joined with "," and not quoted

Import rules:
    - The first row is the header and is discarded unread
    - Fields are split on commas outside double quotes
    - Rows with fewer than MIN_TOKENS fields, or without a valid date,
      are skipped
    - The Type label is mapped back to a kind by LABEL_RULES (first
      substring match wins); anything unrecognized becomes DEFAULT_KIND
    - The CSV ID column is ignored: every row becomes a new record

The import is not an exact inverse of the export: type labels map back by
substring and a tag containing a comma comes back as two tags.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

# --- Local imports ---
from mindnote.core.exceptions import ValidationError
from mindnote.core.validators import DataValidator
from .models import Record, RecordKind

BOM = "\ufeff"
HEADER: Tuple[str, ...] = ("ID", "Date", "Type", "Title", "Content", "Mood", "Tags")
MIN_TOKENS = 5
TAG_SEPARATOR = ","
DEFAULT_KIND = RecordKind.BRAIN_DUMP

# Evaluated in order; the first substring found in the Type column wins.
LABEL_RULES: Tuple[Tuple[str, RecordKind], ...] = (
    ("모닝", RecordKind.MORNING_PAGE),
    ("감정", RecordKind.EMOTION),
    ("회고", RecordKind.RETROSPECTIVE),
    ("Morning", RecordKind.MORNING_PAGE),
    ("Emotion", RecordKind.EMOTION),
    ("Retro", RecordKind.RETROSPECTIVE),
)


# ----- Export -----

def quote_field(value: str) -> str:
    """Wrap a value in double quotes, doubling any quote inside it."""
    return '"' + value.replace('"', '""') + '"'


def encode_row(record: Record, locale: str = "ko") -> str:
    """
    Encode one record as a CSV row (without line terminator).

    Args:
        record: Record to encode
        locale: Language of the Type label

    Returns:
        CSV row text
    """
    return ",".join(
        [
            record.id,
            record.date,
            record.kind.label(locale),
            quote_field(record.title),
            quote_field(record.content),
            str(record.mood) if record.mood is not None else "",
            TAG_SEPARATOR.join(record.tags),
        ]
    )


def export_records(records: Iterable[Record], locale: str = "ko") -> str:
    """
    Serialize records to a CSV document.

    Pure and deterministic: the same records in the same order always give
    the same text.

    Args:
        records: Records in the order they should appear
        locale: Language of the Type labels

    Returns:
        CSV text, BOM included
    """
    lines = [",".join(HEADER)]
    lines.extend(encode_row(record, locale) for record in records)
    return BOM + "\n".join(lines)


# ----- Import -----

@dataclass
class ParseResult:
    """
    Outcome of parsing a CSV document.

    Attributes:
        records: Partial records ready for RecordStore.batch_create
        skipped: Non-blank data rows that were rejected
    """

    records: List[Dict[str, Any]] = field(default_factory=list)
    skipped: int = 0

    @property
    def count(self) -> int:
        """Number of importable records."""
        return len(self.records)


def iter_rows(text: str) -> Iterator[str]:
    """
    Split CSV text into rows.

    Rows end at "\\n" characters outside double quotes, so a quoted field
    may span several lines. A quote that is still open at the end of the
    text was a stray one: everything from the row it opened in is split
    line by line instead. A trailing "\\r" is removed from each row.

    Args:
        text: Raw document text

    Yields:
        Row strings, header included
    """
    in_quotes = False
    row_start = 0

    for index, char in enumerate(text):
        if char == '"':
            in_quotes = not in_quotes
        elif char == "\n" and not in_quotes:
            yield text[row_start:index].removesuffix("\r")
            row_start = index + 1

    rest = text[row_start:]
    if not rest:
        return
    if not in_quotes:
        yield rest.removesuffix("\r")
        return
    for line in rest.removesuffix("\n").split("\n"):
        yield line.removesuffix("\r")


def split_fields(row: str) -> List[str]:
    """
    Split a row into raw field tokens.

    A double quote toggles the inside-quotes state and is kept in the token;
    commas separate fields only outside quotes. Escaped quotes are left as
    they are for clean_value().

    Args:
        row: One CSV row

    Returns:
        Raw tokens
    """
    tokens: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in row:
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == "," and not in_quotes:
            tokens.append("".join(current))
            current = []
        else:
            current.append(char)

    tokens.append("".join(current))
    return tokens


def clean_value(token: str) -> str:
    """
    Strip one surrounding quote from each end and unescape doubled quotes.

    Args:
        token: Raw field token

    Returns:
        Field value
    """
    if token.startswith('"'):
        token = token[1:]
    if token.endswith('"'):
        token = token[:-1]
    return token.replace('""', '"')


def kind_from_label(label: str) -> RecordKind:
    """
    Map a localized Type label back to a record kind.

    Args:
        label: Type column value, possibly partial or garbled

    Returns:
        First matching kind from LABEL_RULES, or DEFAULT_KIND
    """
    for substring, kind in LABEL_RULES:
        if substring in label:
            return kind
    return DEFAULT_KIND


def parse_row(row: str) -> Optional[Dict[str, Any]]:
    """
    Parse one data row into a partial record.

    Args:
        row: One non-header CSV row

    Returns:
        Partial record, or None when the row is not importable
    """
    tokens = split_fields(row)
    if len(tokens) < MIN_TOKENS:
        return None

    try:
        date = DataValidator.normalize_date(clean_value(tokens[1]))
    except ValidationError:
        return None

    kind = kind_from_label(tokens[2])
    mood_raw = clean_value(tokens[5]) if len(tokens) > 5 else ""
    # A tag list written unquoted spills over into extra tokens
    tags_raw = clean_value(TAG_SEPARATOR.join(tokens[6:])) if len(tokens) > 6 else ""

    return {
        "date": date,
        "kind": kind,
        "title": clean_value(tokens[3]),
        "content": clean_value(tokens[4]),
        "mood": (
            DataValidator.normalize_mood(mood_raw, strict=False)
            if kind.has_mood
            else None
        ),
        "tags": [tag for tag in tags_raw.split(TAG_SEPARATOR) if tag] if tags_raw else [],
    }


def parse_records(text: str) -> ParseResult:
    """
    Parse a CSV document into partial records.

    Args:
        text: Document text, with or without BOM

    Returns:
        ParseResult with importable records and the skipped-row count
    """
    result = ParseResult()
    rows = iter_rows(text)

    # Header row, content not validated
    next(rows, None)

    for row in rows:
        if not row.strip():
            continue
        parsed = parse_row(row)
        if parsed is None:
            result.skipped += 1
        else:
            result.records.append(parsed)

    return result


def header_matches(text: str) -> bool:
    """Check whether a document starts with the export header."""
    first = next(iter_rows(text.removeprefix(BOM)), "")
    return split_fields(first) == list(HEADER)

