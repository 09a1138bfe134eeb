#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the MindNote project.

All user data lives under a single home directory, which defaults to
``~/.mindnote`` and can be moved with the ``MINDNOTE_HOME`` environment
variable:

    MINDNOTE_HOME/
    ├── data/          # SQLite database
    ├── exports/       # CSV backups written by `mindnote export`
    ├── logs/          # Application logs
    └── config.yaml    # Optional configuration file

Paths are computed at import time; directories are created lazily by the
components that write into them.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path


def _get_home() -> Path:
    """
    Determine the MindNote home directory.

    Returns:
        MINDNOTE_HOME if set, otherwise ~/.mindnote (both resolved)
    """
    env = os.environ.get("MINDNOTE_HOME")
    if env:
        return Path(env).expanduser().resolve()
    return (Path.home() / ".mindnote").resolve()


# ----- Home directory -----
HOME_DIR: Path = _get_home()

# ---- Data ----
DATA_DIR = HOME_DIR / "data"
DB_PATH = DATA_DIR / "mindnote.db"

# ---- Backups ----
EXPORT_DIR = HOME_DIR / "exports"

# ---- Logs ----
LOG_DIR = HOME_DIR / "logs"

# ---- Configuration ----
CONFIG_PATH = HOME_DIR / "config.yaml"
