#!/usr/bin/env python3
"""
cli_utils.py
-------------------
Shared CLI utilities for MindNote commands.

Functions:
    setup_logger: Initialize MindNoteLogger for CLI operations

Usage:
    from mindnote.core.cli_utils import setup_logger

    logger = setup_logger(log_dir, "cli")
"""
from pathlib import Path

from mindnote.core.logging_manager import MindNoteLogger


def setup_logger(log_dir: Path, component_name: str) -> MindNoteLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    a MindNoteLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier for logging (e.g., 'cli', 'store')

    Returns:
        Configured MindNoteLogger instance
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return MindNoteLogger(operations_log_dir, component_name=component_name)
