"""
Backup Commands
---------------

CSV backup and restore.

Commands:
    - export: Write all records to a CSV file
    - import: Add the records of a CSV file

Usage:
    # Export to the default backup directory
    mindnote export

    # Export to a specific file
    mindnote export ~/backups/notes.csv

    # Restore
    mindnote import ~/backups/mind_notes_2024-05-31.csv
"""
from pathlib import Path

import click

from mindnote.core.exceptions import DatabaseError
from mindnote.core.logging_manager import handle_cli_error
from mindnote.core.paths import EXPORT_DIR
from mindnote.database.export_manager import ExportManager, ImportStatus
from . import get_config, get_identity, get_store


@click.command()
@click.argument("path", type=click.Path(), required=False)
@click.pass_context
def export(ctx, path):
    """Export records to CSV (default: mind_notes_<today>.csv)."""
    destination = Path(path) if path else EXPORT_DIR

    try:
        config = get_config(ctx)
        exporter = ExportManager(logger=ctx.obj.get("logger"), locale=config.locale)
        stats = exporter.export_csv(get_store(ctx), get_identity(ctx).user_id, destination)

        click.echo(f"💾 Exported {stats.records_exported} records")
        click.echo(f"   {stats.output_path}")

    except DatabaseError as e:
        handle_cli_error(
            ctx, e, "export", additional_context={"destination": str(destination)}
        )


@click.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_cmd(ctx, path):
    """Import records from a CSV backup."""
    try:
        config = get_config(ctx)
        exporter = ExportManager(logger=ctx.obj.get("logger"), locale=config.locale)
        result = exporter.import_csv(get_store(ctx), get_identity(ctx).user_id, Path(path))

        if result.status is ImportStatus.NOTHING_TO_IMPORT:
            click.echo("⚠️  Nothing to import")
        else:
            click.echo(f"✅ Imported {result.imported} records")
        if result.skipped:
            click.echo(f"   {result.skipped} malformed rows skipped")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "import", additional_context={"path": path})
