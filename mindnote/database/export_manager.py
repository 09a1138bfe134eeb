#!/usr/bin/env python3
"""
export_manager.py
-----------------
CSV backup and restore for a user's records.

Export:
    - Takes the user's current snapshot (date descending order)
    - Serializes it with mindnote.journal.csv_codec
    - Writes to a temporary file in the target directory, then moves it
      into place, so an interrupted export never leaves a truncated file
    - Default file name: mind_notes_<YYYY-MM-DD>.csv

Import:
    - Decodes the file as UTF-8 (a leading BOM is dropped)
    - Parses every row; malformed rows are skipped and counted
    - Commits all valid rows through RecordStore.batch_create in one
      all-or-nothing transaction
    - A file without valid rows is not an error: the result status is
      ImportStatus.NOTHING_TO_IMPORT

Usage:
    from mindnote.database.export_manager import ExportManager

    exporter = ExportManager(logger=logger)
    stats = exporter.export_csv(store, "alice", Path("backups"))
    result = exporter.import_csv(store, "alice", Path("backups/mind_notes_2024-05-01.csv"))
    print(result.summary())

Notes:
    - Re-importing an export creates duplicates; CSV ids are not identities
    - Store failures propagate as StoreError and nothing is committed
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# --- Local imports ---
from mindnote.core.exceptions import CsvImportError, ExportError
from mindnote.core.logging_manager import MindNoteLogger, safe_logger
from mindnote.journal.csv_codec import export_records, header_matches, parse_records
from mindnote.journal.models import Record
from .decorators import log_database_operation
from .store import RecordStore

EXPORT_PREFIX = "mind_notes_"


def default_export_name(on: Optional[date] = None) -> str:
    """File name of an export made on the given day (default today)."""
    return f"{EXPORT_PREFIX}{(on or date.today()).isoformat()}.csv"


class ImportStatus(str, Enum):
    """Outcome of a CSV import."""

    IMPORTED = "imported"
    NOTHING_TO_IMPORT = "nothing_to_import"


@dataclass
class ExportStats:
    """
    Statistics for a CSV export.

    Attributes:
        records_exported: Number of records written
        output_path: File that was written
        start_time: Operation start timestamp
    """

    records_exported: int = 0
    output_path: Optional[Path] = None
    start_time: datetime = field(default_factory=datetime.now)
    _duration_cached: Optional[float] = field(default=None, init=False, repr=False)

    def duration(self) -> float:
        """Elapsed seconds (cached after first call)."""
        if self._duration_cached is None:
            self._duration_cached = (datetime.now() - self.start_time).total_seconds()
        return self._duration_cached

    def summary(self) -> str:
        return (
            f"{self.records_exported} records exported to {self.output_path}, "
            f"{self.duration():.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "records_exported": self.records_exported,
            "output_path": str(self.output_path) if self.output_path else None,
            "duration": self.duration(),
        }


@dataclass
class ImportResult:
    """
    Outcome of a CSV import.

    Attributes:
        status: IMPORTED or NOTHING_TO_IMPORT
        records: Records created by the import, in file order
        skipped: Data rows rejected as malformed
        header_ok: Whether the first row matched the export header
        start_time: Operation start timestamp
    """

    status: ImportStatus = ImportStatus.NOTHING_TO_IMPORT
    records: List[Record] = field(default_factory=list)
    skipped: int = 0
    header_ok: bool = True
    start_time: datetime = field(default_factory=datetime.now)

    @property
    def imported(self) -> int:
        return len(self.records)

    def summary(self) -> str:
        if self.status is ImportStatus.NOTHING_TO_IMPORT:
            return f"Nothing to import ({self.skipped} rows skipped)"
        return f"{self.imported} records imported, {self.skipped} rows skipped"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "status": self.status.value,
            "imported": self.imported,
            "skipped": self.skipped,
            "header_ok": self.header_ok,
        }


class ExportManager:
    """
    CSV backup and restore against a RecordStore.

    Attributes:
        logger: Optional logger
        locale: Language of the Type labels written on export
    """

    def __init__(self, logger: Optional[MindNoteLogger] = None, locale: str = "ko"):
        """
        Initialize the export manager.

        Args:
            logger: Optional logger for export operations
            locale: Language of exported Type labels ("ko" or "en")
        """
        self.logger = logger
        self.locale = locale

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def export_text(self, store: RecordStore, user_id: str) -> str:
        """CSV document of a user's current snapshot."""
        return export_records(store.snapshot(user_id), self.locale)

    @log_database_operation("export_csv")
    def export_csv(
        self,
        store: RecordStore,
        user_id: str,
        destination: Union[str, Path],
    ) -> ExportStats:
        """
        Write a user's records to a CSV file.

        Args:
            store: Record store to read from
            user_id: Whose records to export
            destination: Target file, or a directory to receive
                mind_notes_<today>.csv

        Returns:
            ExportStats

        Raises:
            ExportError: If the file cannot be written
            StoreError: If the records cannot be read
        """
        stats = ExportStats()
        destination = Path(destination).expanduser()
        if destination.is_dir() or not destination.suffix:
            destination = destination / default_export_name()

        records = store.snapshot(user_id)
        text = export_records(records, self.locale)

        temp_path: Optional[Path] = None
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="",
                suffix=".csv",
                dir=destination.parent,
                delete=False,
            ) as handle:
                temp_path = Path(handle.name)
                handle.write(text)
            shutil.move(str(temp_path), str(destination))
        except OSError as e:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink()
            safe_logger(self.logger).log_error(
                e, {"operation": "export_csv", "destination": str(destination)}
            )
            raise ExportError(f"Failed to write CSV {destination}: {e}") from e

        stats.records_exported = len(records)
        stats.output_path = destination
        safe_logger(self.logger).log_operation("export_csv", stats.to_dict())
        return stats

    # -------------------------------------------------------------------------
    # Import
    # -------------------------------------------------------------------------

    def read_source(self, source: Union[str, Path]) -> str:
        """
        Get document text from a path or a string.

        A Path is read from disk; a str is taken as the document itself.

        Raises:
            CsvImportError: If the file cannot be read or is not UTF-8
        """
        if not isinstance(source, Path):
            return source
        try:
            return source.expanduser().read_bytes().decode("utf-8-sig")
        except FileNotFoundError as e:
            raise CsvImportError(f"Backup file not found: {source}") from e
        except UnicodeDecodeError as e:
            raise CsvImportError(f"Cannot read backup file {source}: not UTF-8") from e
        except OSError as e:
            raise CsvImportError(f"Cannot read backup file {source}: {e}") from e

    @log_database_operation("import_csv")
    def import_csv(
        self,
        store: RecordStore,
        user_id: str,
        source: Union[str, Path],
    ) -> ImportResult:
        """
        Import a CSV backup as new records.

        Args:
            store: Record store to write to
            user_id: Owner of the imported records
            source: Backup file (Path) or document text (str)

        Returns:
            ImportResult; NOTHING_TO_IMPORT when no row was valid

        Raises:
            CsvImportError: If the file cannot be read
            StoreError: If the batch write fails (nothing is committed)
        """
        text = self.read_source(source)
        result = ImportResult(header_ok=header_matches(text))

        if not result.header_ok:
            safe_logger(self.logger).log_warning(
                "CSV header differs from the export format; parsing anyway",
                {"source": str(source) if isinstance(source, Path) else "<text>"},
            )

        parsed = parse_records(text)
        result.skipped = parsed.skipped

        if parsed.count == 0:
            safe_logger(self.logger).log_info(
                "Nothing to import", {"skipped": parsed.skipped}
            )
            return result

        result.records = store.batch_create(user_id, parsed.records)
        result.status = ImportStatus.IMPORTED
        safe_logger(self.logger).log_operation("import_csv", result.to_dict())
        return result
