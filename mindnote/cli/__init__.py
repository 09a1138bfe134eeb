#!/usr/bin/env python3
"""
MindNote CLI
------------

Command-line interface for writing and browsing journal records.

This module provides the main CLI group and shared context setup
for all commands.

Command Structure:
    - Records (add, edit, delete, list, show)
    - Reports (stats, calendar)
    - Backup (export, import)

Usage:
    # Write an emotion log for today
    mindnote add --kind Emotion --mood 4 --title "Sunny"

    # Browse a month
    mindnote calendar --month 2024-05

    # Back up and restore
    mindnote export ~/backups
    mindnote import ~/backups/mind_notes_2024-05-31.csv
"""
from pathlib import Path

import click

from mindnote.core.cli_utils import setup_logger
from mindnote.core.config import GUEST_USER_ID, MindNoteConfig, load_config
from mindnote.core.exceptions import ConfigError
from mindnote.database import SqlRecordStore, StoreConfig
from mindnote.journal.models import Identity


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to YAML configuration file",
)
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Path to log directory",
)
@click.option("--user", "user_id", default=None, help="User whose records to use")
@click.option(
    "--guest",
    is_flag=True,
    help="Use a temporary in-memory store (nothing is saved)",
)
@click.option("--app-id", default=None, help="App namespace of the records")
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, config_path, db_path, log_dir, user_id, guest, app_id, verbose):
    """MindNote journaling CLI"""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    try:
        config = load_config(config_path).with_overrides(
            db_path=db_path,
            log_dir=log_dir,
            user_id=user_id,
            app_id=app_id,
            is_guest=guest or None,
        )
        if config.is_guest and user_id is None:
            config = config.with_overrides(user_id=GUEST_USER_ID)
    except ConfigError as e:
        raise click.UsageError(str(e))

    ctx.obj["config"] = config
    ctx.obj["logger"] = setup_logger(Path(config.log_dir), "cli").bind(
        app_id=config.app_id, user_id=config.user_id
    )


def get_config(ctx) -> MindNoteConfig:
    """Get the resolved configuration from context."""
    return ctx.obj["config"]


def get_identity(ctx) -> Identity:
    """Get the identity commands act for."""
    config = get_config(ctx)
    return Identity(user_id=config.user_id, is_guest=config.is_guest)


def get_store(ctx) -> SqlRecordStore:
    """Get or create the record store from context."""
    if "store" not in ctx.obj:
        ctx.obj["store"] = SqlRecordStore(
            StoreConfig.from_config(get_config(ctx)),
            logger=ctx.obj.get("logger"),
        )
        ctx.call_on_close(ctx.obj["store"].close)
    return ctx.obj["store"]


# Import and register command modules
# These imports must come after CLI group definition
from .records import add, edit, delete, list_records, show  # noqa: E402
from .reports import stats, calendar_cmd  # noqa: E402
from .transfer import export, import_cmd  # noqa: E402

cli.add_command(add)
cli.add_command(edit)
cli.add_command(delete)
cli.add_command(list_records)
cli.add_command(show)
cli.add_command(stats)
cli.add_command(calendar_cmd)
cli.add_command(export)
cli.add_command(import_cmd)


if __name__ == "__main__":
    cli(obj={})
