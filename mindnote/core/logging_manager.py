#!/usr/bin/env python3
"""
logging_manager.py
--------------------
Logging for MindNote stores, backups and commands.

A MindNoteLogger can be bound to the record scope it works for (app_id and
user_id). Every line it writes then starts with that scope, so one log file
holding several users' activity can still be read per user:

    09:12:03 - cli.operations - INFO - [alice@mind-notes] OPERATION - store_create: {...}

Files written under ``log_dir``:
    <component>.log   everything from DEBUG up
    errors.log        errors, each with its traceback

Commands report failures through handle_cli_error(), which logs the full
error with the command's scope and prints a one-line message, plus a hint
for the errors a user can act on.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import copy
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click

# --- Local imports ---
from .exceptions import (
    CsvImportError,
    ExportError,
    RecordNotFoundError,
    RecordValidationError,
    StoreError,
)

LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(message)s"

# Shown under the error line for failures the user can do something about
ERROR_HINTS = {
    RecordNotFoundError: "Run 'mindnote list' to see the ids of your records.",
    RecordValidationError: "See 'mindnote edit --help'; a record's kind cannot be changed.",
    CsvImportError: "Backups must be UTF-8 CSV files written by 'mindnote export'.",
    ExportError: "Check that the export directory exists and is writable.",
    StoreError: "Another mindnote process may hold the database; try again.",
}


def _dump(details: Dict[str, Any]) -> str:
    return json.dumps(details, default=str, ensure_ascii=False)


def describe_error(error: Exception, show_traceback: bool = False) -> str:
    """
    One-line terminal message for an error, with its hint if it has one.

    Examples:
        >>> describe_error(StoreError("disk full"))
        "❌ StoreError: disk full\\n   💡 Another mindnote process may hold the database; try again."
    """
    message = f"❌ {type(error).__name__}: {error}"
    for error_type, hint in ERROR_HINTS.items():
        if isinstance(error, error_type):
            message += f"\n   💡 {hint}"
            break
    if show_traceback and error.__traceback__ is not None:
        message += "\n\n" + "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    return message


class MindNoteLogger:
    """
    Rotating file logger for one component, optionally bound to a user.

    Attributes:
        log_dir: Directory for log files
        component_name: Name of the component using this logger
        scope: app_id / user_id prefixed to every line
        main_logger: Component log (DEBUG and up)
        error_logger: errors.log
    """

    def __init__(self, log_dir: Path, component_name: str = "mindnote") -> None:
        """
        Open the component log and errors.log under ``log_dir``.

        Args:
            log_dir: Directory for log files (created if missing)
            component_name: Log file and logger name, e.g. 'cli' or 'store'
        """
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.scope: Dict[str, Any] = {}
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = self._open(
            f"{component_name}.operations",
            self.log_dir / f"{component_name}.log",
            logging.DEBUG,
        )
        self.error_logger = self._open(
            f"{component_name}.errors", self.log_dir / "errors.log", logging.ERROR
        )

        console = logging.StreamHandler()
        console.setLevel(logging.WARNING)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        # Errors reach the terminal through handle_cli_error
        console.addFilter(lambda record: record.levelno < logging.ERROR)
        self.main_logger.addHandler(console)

    @staticmethod
    def _open(name: str, file_path: Path, level: int) -> logging.Logger:
        logger = logging.getLogger(name)
        # A second MindNoteLogger for the same component replaces the first
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(level)
        logger.propagate = False

        handler = RotatingFileHandler(
            file_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
        return logger

    def bind(self, **scope: Any) -> "MindNoteLogger":
        """
        Logger sharing these files whose lines carry the given scope.

        Args:
            **scope: Usually app_id and user_id; None values are ignored

        Returns:
            New MindNoteLogger; the original is unchanged
        """
        bound = copy.copy(self)
        bound.scope = {**self.scope, **{k: v for k, v in scope.items() if v is not None}}
        return bound

    def close(self) -> None:
        """Close and detach all handlers."""
        for logger in (self.main_logger, self.error_logger):
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    # ---- Writing ----

    def _prefix(self) -> str:
        user = self.scope.get("user_id")
        app = self.scope.get("app_id")
        if user and app:
            return f"[{user}@{app}] "
        if user or app:
            return f"[{user or app}] "
        return ""

    def _write(self, level: int, tag: str, message: str, details: Optional[Dict[str, Any]]) -> None:
        line = f"{self._prefix()}{tag} - {message}"
        if details:
            line += f": {_dump(details)}"
        self.main_logger.log(level, line)

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Record a completed store, backup or command operation."""
        self._write(logging.INFO, "OPERATION", operation, details)

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._write(logging.DEBUG, "DEBUG", message, details)

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._write(logging.INFO, "INFO", message, details)

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self._write(logging.WARNING, "WARNING", message, details)

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Log an error to errors.log with its context and traceback.

        A one-line copy goes to the component log so the failure shows up
        between the operations around it.

        Args:
            error: Exception that occurred
            context: Operation, record id and similar details
        """
        summary = f"{type(error).__name__}: {error}"
        self._write(logging.ERROR, "ERROR", summary, context)

        lines = [f"{self._prefix()}ERROR - {summary}"]
        if context:
            lines.append("Context: " + ", ".join(f"{k}={v}" for k, v in context.items()))
        if error.__traceback__ is not None:
            lines.append(
                "".join(traceback.format_exception(type(error), error, error.__traceback__))
            )
        self.error_logger.error("\n".join(lines))

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """
        Log a command failure and return the message to print.

        Args:
            error: Exception raised by the command
            context: Command name and arguments
            show_traceback: Append the traceback to the message (--verbose)

        Returns:
            Terminal message from describe_error()
        """
        self.log_error(error, context or {"source": "cli"})
        return describe_error(error, show_traceback)


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    command: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Report a failed mindnote command and exit.

    The logged context names the command and, once the group has resolved
    its configuration, the user and app the command ran for.

    Args:
        ctx: Click context; ``ctx.obj`` holds logger, verbose and config
        error: Exception raised by the command
        command: Command name, e.g. 'add' or 'import'
        additional_context: Command arguments worth logging (record id, path)
        exit_code: Process exit code

    Note:
        Never returns.
    """
    context: Dict[str, Any] = {"command": command}
    config = ctx.obj.get("config")
    if config is not None:
        context["user_id"] = config.user_id
        context["app_id"] = config.app_id
        if config.is_guest:
            context["guest"] = True
    if additional_context:
        context.update(additional_context)

    message = safe_logger(ctx.obj.get("logger")).log_cli_error(
        error, context, show_traceback=ctx.obj.get("verbose", False)
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


class NullLogger:
    """Stand-in with the MindNoteLogger interface that writes nothing."""

    def bind(self, **scope: Any) -> "NullLogger":
        return self

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_info(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_warning(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return describe_error(error, show_traceback)


_null_logger = NullLogger()


def safe_logger(logger: Optional[MindNoteLogger]) -> MindNoteLogger:
    """
    Return the logger, or the shared NullLogger when it is None.

    Usage:
        safe_logger(self.logger).log_info("Deleted record", {"record_id": rid})
    """
    return logger if logger is not None else _null_logger  # type: ignore[return-value]
