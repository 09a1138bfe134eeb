#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the MindNote project.

This module defines a hierarchy of exceptions used throughout the project
to handle specific error conditions in different subsystems.

Exception Hierarchy:
    Exception (built-in)
    ├── DatabaseError - Base for all store-related errors
    │   ├── StoreError - A store write/read failed (nothing was applied)
    │   ├── RecordNotFoundError - Record id unknown for this user
    │   ├── ExportError - CSV export failures
    │   └── CsvImportError - CSV file could not be read at all
    ├── ValidationError - Data validation failures
    │   └── RecordValidationError - Record-specific validation failures
    └── ConfigError - Configuration file or value problems

Usage:
    from mindnote.core.exceptions import StoreError, ValidationError

    try:
        store.create(user_id, {"kind": "Emotion", "mood": 4})
    except ValidationError as e:
        logger.log_error(e)
    except StoreError as e:
        logger.log_error(e, {"operation": "create"})
"""


class DatabaseError(Exception):
    """
    Base exception for store-related errors.

    Raised when record store operations fail due to connection issues,
    query errors, integrity violations, or other database problems.

    This is the parent class for all store-specific exceptions.
    Catch this to handle any store error, or catch specific
    subclasses for more granular error handling.

    Examples:
        >>> raise DatabaseError("Connection to database failed")

    See Also:
        StoreError, RecordNotFoundError, ExportError, CsvImportError
    """

    pass


class StoreError(DatabaseError):
    """
    Exception for failed store operations.

    Raised when a create, update, delete or batch operation could not be
    committed. The transaction is rolled back before this is raised, so a
    failed write never leaves partial data behind and subscribers keep the
    last successful snapshot.

    Examples:
        >>> raise StoreError("Record rejected by the database: CHECK constraint failed")
        >>> raise StoreError("Record store unavailable: disk I/O error")
    """

    pass


class RecordNotFoundError(DatabaseError):
    """
    Exception for operations on a record id that does not exist.

    Records are scoped by (app_id, user_id); an id belonging to another
    user is reported the same way as a missing one.

    Examples:
        >>> raise RecordNotFoundError("No record found with id: 3f2a...")
    """

    pass


class ExportError(DatabaseError):
    """
    Exception for CSV export failures.

    Raised when writing a backup file fails:
    - Output directory not writable
    - Disk full

    Examples:
        >>> raise ExportError("Failed to write CSV: permission denied")
    """

    pass


class CsvImportError(DatabaseError):
    """
    Exception for CSV import failures that prevent parsing altogether.

    A malformed row is not an error (it is skipped), and a file without any
    valid row is reported as ImportStatus.NOTHING_TO_IMPORT. This exception
    is only for files that cannot be read or decoded.

    Examples:
        >>> raise CsvImportError("Cannot read backup file: not UTF-8")
    """

    pass


class ValidationError(Exception):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Invalid date formats
    - Unknown record kinds
    - Type mismatches
    - Constraint violations

    Examples:
        >>> raise ValidationError("Invalid date format: expected YYYY-MM-DD")
        >>> raise ValidationError("Mood must be between 1 and 5")
    """

    pass


class RecordValidationError(ValidationError):
    """
    Exception for record-specific validation failures.

    Examples:
        >>> raise RecordValidationError("Record kind cannot be changed")
    """

    pass


class ConfigError(Exception):
    """
    Exception for configuration problems.

    Raised when the YAML configuration file is unreadable or holds values
    of the wrong type.

    Examples:
        >>> raise ConfigError("autosave_delay must be a positive number")
    """

    pass
