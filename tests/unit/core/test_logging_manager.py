"""
Tests for logging_manager module.

Covers the rotating MindNoteLogger, the NullLogger / safe_logger pair and
the click error handler shared by all commands.
"""
import pytest
import click
from unittest.mock import MagicMock

from mindnote.core.cli_utils import setup_logger
from mindnote.core.config import MindNoteConfig
from mindnote.core.exceptions import CsvImportError, RecordNotFoundError, StoreError
from mindnote.core.logging_manager import (
    MindNoteLogger,
    NullLogger,
    describe_error,
    handle_cli_error,
    safe_logger,
)


class TestMindNoteLogger:
    """Tests for the file-backed logger."""

    def test_creates_component_and_error_logs(self, tmp_path):
        """Logger should write the component log and errors.log."""
        logger = MindNoteLogger(tmp_path / "logs", component_name="store")
        logger.log_operation("create_record", {"record_id": "abc"})
        try:
            raise StoreError("disk full")
        except StoreError as e:
            logger.log_error(e, {"operation": "create"})
        logger.close()

        component_log = (tmp_path / "logs" / "store.log").read_text(encoding="utf-8")
        error_log = (tmp_path / "logs" / "errors.log").read_text(encoding="utf-8")
        assert "OPERATION - create_record" in component_log
        assert '"record_id": "abc"' in component_log
        assert "StoreError: disk full" in error_log
        assert "operation=create" in error_log

    def test_details_with_non_json_values(self, tmp_path):
        """Details that JSON cannot encode natively should be stringified."""
        from datetime import date

        logger = MindNoteLogger(tmp_path, component_name="dates")
        logger.log_info("Deleted record", {"date": date(2024, 5, 1)})
        logger.close()

        assert "2024-05-01" in (tmp_path / "dates.log").read_text(encoding="utf-8")

    def test_bound_scope_prefixes_lines(self, tmp_path):
        """A bound logger should prefix lines with user and app."""
        logger = MindNoteLogger(tmp_path, component_name="store")
        bound = logger.bind(app_id="mind-notes", user_id="alice", ignored=None)
        bound.log_operation("store_create", {"record_id": "r1"})
        logger.log_info("unbound")
        logger.close()

        lines = (tmp_path / "store.log").read_text(encoding="utf-8").splitlines()
        assert "[alice@mind-notes] OPERATION - store_create" in lines[0]
        assert "INFO - unbound" in lines[1]
        assert "[" not in lines[1].split(" - ", 3)[3]
        assert bound.scope == {"app_id": "mind-notes", "user_id": "alice"}
        assert logger.scope == {}

    def test_error_traceback_comes_from_the_error(self, tmp_path):
        """The traceback should be the error's own, even outside its handler."""
        logger = MindNoteLogger(tmp_path, component_name="store")
        try:
            raise StoreError("disk full")
        except StoreError as e:
            caught = e
        logger.log_error(caught)
        logger.close()

        error_log = (tmp_path / "errors.log").read_text(encoding="utf-8")
        assert "Traceback (most recent call last)" in error_log
        assert "test_error_traceback_comes_from_the_error" in error_log

    def test_log_cli_error_format(self, tmp_path):
        """log_cli_error should return the error line and its hint, no traceback."""
        logger = MindNoteLogger(tmp_path, component_name="cli")
        message = logger.log_cli_error(StoreError("Connection failed"))
        logger.close()

        first, hint = message.split("\n")
        assert first == "❌ StoreError: Connection failed"
        assert "try again" in hint

    def test_setup_logger_uses_operations_subdir(self, tmp_path):
        """setup_logger should log under <log_dir>/operations."""
        logger = setup_logger(tmp_path, "cli")
        logger.log_info("hello")
        logger.close()

        assert (tmp_path / "operations" / "cli.log").exists()


class TestNullLogger:
    """Tests for NullLogger class."""

    def test_null_logger_methods_are_no_ops(self):
        """Every NullLogger method should accept its arguments and do nothing."""
        logger = NullLogger()
        logger.log_operation("op", {"key": "value"})
        logger.log_error(ValueError("x"), {"context": "test"})
        logger.log_debug("debug", {"key": "value"})
        logger.log_info("info")
        logger.log_warning("warning", {"key": "value"})
        assert logger.bind(user_id="alice") is logger

    def test_null_logger_log_cli_error_returns_formatted(self):
        """NullLogger.log_cli_error should still return the display message."""
        result = NullLogger().log_cli_error(ValueError("test error"))
        assert result == "❌ ValueError: test error"


class TestSafeLogger:
    """Tests for safe_logger function."""

    def test_returns_logger_when_provided(self):
        """safe_logger should return the same logger when not None."""
        mock_logger = MagicMock(spec=MindNoteLogger)
        assert safe_logger(mock_logger) is mock_logger

    def test_returns_null_logger_singleton_when_none(self):
        """safe_logger should return one shared NullLogger for None."""
        assert isinstance(safe_logger(None), NullLogger)
        assert safe_logger(None) is safe_logger(None)

    def test_forwards_calls(self):
        """Calls through safe_logger should reach the real logger."""
        mock_logger = MagicMock(spec=MindNoteLogger)
        safe_logger(mock_logger).log_operation("process", {"n": 1})
        mock_logger.log_operation.assert_called_once_with("process", {"n": 1})


class TestHandleCliError:
    """Tests for handle_cli_error."""

    def test_echoes_and_exits(self, capsys):
        """handle_cli_error should print the message and exit with the code."""
        ctx = click.Context(click.Command("test"), obj={"verbose": False})

        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ctx, StoreError("boom"), "add", exit_code=2)

        assert exc_info.value.code == 2
        assert "StoreError: boom" in capsys.readouterr().err

    def test_logs_with_context(self):
        """handle_cli_error should pass the operation context to the logger."""
        mock_logger = MagicMock(spec=MindNoteLogger)
        mock_logger.log_cli_error.return_value = "❌ StoreError: boom"
        ctx = click.Context(
            click.Command("test"), obj={"logger": mock_logger, "verbose": True}
        )

        with pytest.raises(SystemExit):
            handle_cli_error(
                ctx, StoreError("boom"), "edit", additional_context={"record_id": "r1"}
            )

        args, kwargs = mock_logger.log_cli_error.call_args
        assert args[1] == {"command": "edit", "record_id": "r1"}
        assert kwargs["show_traceback"] is True

    def test_context_names_the_user(self):
        """Once config is resolved, the logged context should name user and app."""
        mock_logger = MagicMock(spec=MindNoteLogger)
        mock_logger.log_cli_error.return_value = "❌ StoreError: boom"
        config = MindNoteConfig(app_id="mind-notes", user_id="guest", is_guest=True)
        ctx = click.Context(
            click.Command("test"), obj={"logger": mock_logger, "config": config}
        )

        with pytest.raises(SystemExit):
            handle_cli_error(ctx, StoreError("boom"), "import", {"path": "b.csv"})

        args, kwargs = mock_logger.log_cli_error.call_args
        assert args[1] == {
            "command": "import",
            "user_id": "guest",
            "app_id": "mind-notes",
            "guest": True,
            "path": "b.csv",
        }
        assert kwargs["show_traceback"] is False


class TestDescribeError:
    """Tests for the terminal error messages."""

    @pytest.mark.parametrize(
        "error, hint",
        [
            (RecordNotFoundError("No record found with id: x"), "mindnote list"),
            (CsvImportError("Backup is not UTF-8"), "mindnote export"),
        ],
    )
    def test_actionable_errors_get_hints(self, error, hint):
        """Errors a user can act on should point at the command that helps."""
        message = describe_error(error)
        assert message.startswith(f"❌ {type(error).__name__}: {error}")
        assert hint in message

    def test_traceback_on_request(self):
        """show_traceback should append the error's traceback."""
        try:
            raise ValueError("bad")
        except ValueError as e:
            message = describe_error(e, show_traceback=True)

        assert message.startswith("❌ ValueError: bad\n\nTraceback")
