"""
Record Commands
---------------

Create, change, remove and browse journal records.

Commands:
    - add: Create a record
    - edit: Change fields of a record
    - delete: Permanently delete a record
    - list: Filtered list grouped by date
    - show: Display one record

Usage:
    mindnote add --kind BrainDump --content "Too many tabs open"
    mindnote add --kind Retrospective --keep "Daily walks" --try "Sleep earlier"
    mindnote list --kind Emotion --search coffee
    mindnote edit 3f2a9c... --title "Better title"
    mindnote delete 3f2a9c... --yes
"""
from typing import Any, Dict

import click

from mindnote.core.exceptions import DatabaseError, ValidationError
from mindnote.core.logging_manager import handle_cli_error
from mindnote.journal.editing import EditingSession
from mindnote.journal.models import Record, RecordKind, mood_emoji
from mindnote.journal.query import FilterSpec, filter_records, group_by_date, sorted_dates
from mindnote.journal.retrospective import split
from . import get_config, get_identity, get_store

KIND_CHOICE = click.Choice(RecordKind.choices(), case_sensitive=False)


def _draft_fields(**options: Any) -> Dict[str, Any]:
    """Keep only the options the user actually passed."""
    fields = {name: value for name, value in options.items() if value is not None}
    if not fields.get("tags"):
        fields.pop("tags", None)
    else:
        fields["tags"] = list(fields["tags"])
    return fields


def format_record_line(record: Record, locale: str) -> str:
    """One-line summary used by list and calendar."""
    mood = f" {mood_emoji(record.mood)}" if record.kind.has_mood else ""
    title = record.title or "(untitled)"
    return f"  • [{record.kind.label(locale)}]{mood} {title}  ({record.id})"


@click.command()
@click.option("--kind", type=KIND_CHOICE, required=True, help="Record kind")
@click.option("--date", "date_", default=None, help="Date (YYYY-MM-DD), default today")
@click.option("--title", default=None, help="Title")
@click.option("--content", default=None, help="Content")
@click.option("--mood", type=click.IntRange(1, 5), default=None, help="Mood 1-5 (Emotion)")
@click.option("--keep", default=None, help="Keep section (Retrospective)")
@click.option("--problem", default=None, help="Problem section (Retrospective)")
@click.option("--try", "try_", default=None, help="Try section (Retrospective)")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.pass_context
def add(ctx, kind, date_, title, content, mood, keep, problem, try_, tags):
    """Create a record."""
    try:
        config = get_config(ctx)
        with EditingSession(
            get_store(ctx),
            get_identity(ctx),
            kind=RecordKind.parse(kind),
            autosave_delay=config.autosave_delay,
            logger=ctx.obj.get("logger"),
        ) as session:
            session.edit(
                **_draft_fields(
                    date=date_,
                    title=title,
                    content=content,
                    mood=mood,
                    keep=keep,
                    problem=problem,
                    try_=try_,
                    tags=tags,
                )
            )
            record = session.save()

        click.echo(f"✅ Created {record.kind.label(config.locale)} for {record.date}")
        click.echo(f"   id: {record.id}")

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "add", additional_context={"kind": kind})


@click.command()
@click.argument("record_id")
@click.option("--date", "date_", default=None, help="New date (YYYY-MM-DD)")
@click.option("--title", default=None, help="New title")
@click.option("--content", default=None, help="New content")
@click.option("--mood", type=click.IntRange(1, 5), default=None, help="New mood 1-5")
@click.option("--keep", default=None, help="New Keep section")
@click.option("--problem", default=None, help="New Problem section")
@click.option("--try", "try_", default=None, help="New Try section")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable)")
@click.pass_context
def edit(ctx, record_id, date_, title, content, mood, keep, problem, try_, tags):
    """Change fields of a record; unspecified fields are kept."""
    fields = _draft_fields(
        date=date_,
        title=title,
        content=content,
        mood=mood,
        keep=keep,
        problem=problem,
        try_=try_,
        tags=tags,
    )
    if not fields:
        click.echo("⚠️  Nothing to change")
        return

    try:
        store = get_store(ctx)
        identity = get_identity(ctx)
        existing = store.get(identity.user_id, record_id)

        with EditingSession(
            store, identity, record=existing, logger=ctx.obj.get("logger")
        ) as session:
            session.edit(**fields)
            record = session.save()

        click.echo(f"✅ Updated record {record.id} ({record.date})")

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "edit", additional_context={"record_id": record_id})


@click.command()
@click.argument("record_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete(ctx, record_id, yes):
    """Permanently delete a record."""
    try:
        store = get_store(ctx)
        identity = get_identity(ctx)
        record = store.get(identity.user_id, record_id)

        if not yes:
            click.confirm(
                f"Delete '{record.title or '(untitled)'}' from {record.date}?",
                abort=True,
            )

        store.delete(identity.user_id, record_id)
        click.echo(f"🗑️  Deleted record {record_id}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "delete", additional_context={"record_id": record_id})


@click.command("list")
@click.option("--search", default="", help="Text to find in title or content")
@click.option("--kind", type=KIND_CHOICE, default=None, help="Only this kind")
@click.option("--date", "date_", default=None, help="Only this date (YYYY-MM-DD)")
@click.pass_context
def list_records(ctx, search, kind, date_):
    """List records grouped by date, most recent first."""
    try:
        config = get_config(ctx)
        identity = get_identity(ctx)
        records = get_store(ctx).snapshot(identity.user_id)

        spec = FilterSpec(
            search_term=search,
            kind=RecordKind.parse(kind) if kind else None,
            active_date=date_,
        )
        groups = group_by_date(filter_records(records, spec))

        if not groups:
            click.echo("No records found")
            return

        for day in sorted_dates(groups):
            click.echo(f"\n📅 {day}")
            for record in groups[day]:
                click.echo(format_record_line(record, config.locale))

        total = sum(len(day_records) for day_records in groups.values())
        click.echo(f"\n{total} of {len(records)} records")

    except (ValidationError, DatabaseError) as e:
        handle_cli_error(ctx, e, "list")


@click.command()
@click.argument("record_id")
@click.pass_context
def show(ctx, record_id):
    """Display a single record."""
    try:
        config = get_config(ctx)
        identity = get_identity(ctx)
        record = get_store(ctx).get(identity.user_id, record_id)

        click.echo(f"\n📅 {record.date}  [{record.kind.label(config.locale)}]")
        if record.title:
            click.echo(f"📝 {record.title}")
        if record.kind.has_mood:
            click.echo(f"Mood: {mood_emoji(record.mood)} ({record.mood or '-'})")

        if record.kind is RecordKind.RETROSPECTIVE:
            sections = split(record.content)
            for header, body in (
                ("Keep", sections.keep),
                ("Problem", sections.problem),
                ("Try", sections.try_),
            ):
                click.echo(f"\n{header}:")
                click.echo(body or "  -")
        elif record.content:
            click.echo(f"\n{record.content}")

        if record.tags:
            click.echo(f"\n🏷️  Tags: {', '.join(record.tags)}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "show", additional_context={"record_id": record_id})
