#!/usr/bin/env python3
"""
config.py
--------------------
Explicit configuration for MindNote.

Deployment identifiers (the app namespace, the current user) are carried
in a MindNoteConfig value that is handed to the record store, instead of
being read from process-wide globals.

Resolution order (later wins):
    1. Dataclass defaults
    2. YAML file (``config.yaml`` in MINDNOTE_HOME, or an explicit path)
    3. Environment variables (MINDNOTE_APP_ID, MINDNOTE_USER)
    4. CLI options (applied by the caller through ``with_overrides``)

Example config.yaml:
    app_id: mind-notes
    user_id: alice
    locale: en
    autosave_delay: 3
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

# --- Third party imports ---
import yaml

# --- Local imports ---
from .exceptions import ConfigError
from .paths import CONFIG_PATH, DB_PATH, LOG_DIR

DEFAULT_APP_ID = "default-app-id"
GUEST_USER_ID = "guest"
SUPPORTED_LOCALES = ("ko", "en")


@dataclass(frozen=True)
class MindNoteConfig:
    """
    Runtime configuration.

    Attributes:
        app_id: Namespace isolating one deployment's records from another's
        user_id: Opaque identifier of the record owner
        is_guest: Guest identities use a non-persistent in-memory store
        db_path: SQLite database file for persistent identities
        log_dir: Base directory for log files
        locale: Language of the type labels written to CSV exports
        autosave_delay: Seconds of inactivity before an editing session autosaves
    """

    app_id: str = DEFAULT_APP_ID
    user_id: str = GUEST_USER_ID
    is_guest: bool = False
    db_path: Path = DB_PATH
    log_dir: Path = LOG_DIR
    locale: str = "ko"
    autosave_delay: float = 3.0
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not self.app_id:
            raise ConfigError("app_id cannot be empty")
        if not self.user_id:
            raise ConfigError("user_id cannot be empty")
        if self.locale not in SUPPORTED_LOCALES:
            raise ConfigError(
                f"Unsupported locale '{self.locale}'. "
                f"Choose one of: {', '.join(SUPPORTED_LOCALES)}"
            )
        if self.autosave_delay <= 0:
            raise ConfigError("autosave_delay must be a positive number")

    def with_overrides(self, **overrides: Any) -> "MindNoteConfig":
        """
        Return a copy with the non-None overrides applied.

        Args:
            **overrides: Field values, typically straight from CLI options

        Returns:
            New MindNoteConfig
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        for key in ("db_path", "log_dir"):
            if key in values:
                values[key] = Path(values[key]).expanduser().resolve()
        return replace(self, **values)


def _coerce(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Convert raw YAML values to the types MindNoteConfig expects."""
    known = {f.name for f in fields(MindNoteConfig)} - {"extra"}
    values: Dict[str, Any] = {}
    extra: Dict[str, Any] = {}

    for key, value in raw.items():
        if key not in known:
            extra[key] = value
            continue
        if key in ("db_path", "log_dir"):
            values[key] = Path(str(value)).expanduser().resolve()
        elif key == "autosave_delay":
            try:
                values[key] = float(value)
            except (TypeError, ValueError):
                raise ConfigError(f"autosave_delay must be a number, got {value!r}")
        elif key == "is_guest":
            if not isinstance(value, bool):
                raise ConfigError(f"is_guest must be true or false, got {value!r}")
            values[key] = value
        else:
            values[key] = str(value)

    values["extra"] = extra
    return values


def load_config(path: Optional[Union[str, Path]] = None) -> MindNoteConfig:
    """
    Load configuration from YAML and the environment.

    A missing file is not an error: defaults are used. A file that exists
    but is not a YAML mapping is.

    Args:
        path: Explicit config file; defaults to MINDNOTE_HOME/config.yaml

    Returns:
        Resolved MindNoteConfig

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    config_path = Path(path).expanduser() if path else CONFIG_PATH
    raw: Dict[str, Any] = {}

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse config file {config_path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")
        raw.update(data)
    elif path:
        raise ConfigError(f"Config file not found: {config_path}")

    env_app_id = os.environ.get("MINDNOTE_APP_ID")
    if env_app_id:
        raw["app_id"] = env_app_id
    env_user = os.environ.get("MINDNOTE_USER")
    if env_user:
        raw["user_id"] = env_user

    return MindNoteConfig(**_coerce(raw))
