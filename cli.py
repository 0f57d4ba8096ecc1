#!/usr/bin/env python3
"""
Chapel CLI

Command-line admin tool for the church site's Supabase data.
"""

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

console = Console()

# CLI entity name -> ChurchAPI attribute
ENTITIES = {
    "sermons": "sermons",
    "events": "events",
    "members": "members",
    "gallery": "gallery",
    "testimonials": "testimonials",
    "prayer-requests": "prayer_requests",
    "donations": "donations",
    "users": "users",
    "appointments": "appointments",
    "email-subscribers": "email_subscribers",
    "email-templates": "email_templates",
    "email-campaigns": "email_campaigns",
}


def setup_logging(verbose: bool) -> None:
    """Route package logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def parse_where(pairs: tuple) -> dict:
    """Turn ('status=pending', 'is_public=true') into equality predicates."""
    predicates = {}
    for pair in pairs:
        if "=" not in pair:
            raise click.BadParameter(f"Expected column=value, got '{pair}'", param_hint="--where")
        column, value = pair.split("=", 1)
        lowered = value.lower()
        if lowered in ("true", "false"):
            predicates[column] = lowered == "true"
        else:
            predicates[column] = value
    return predicates


def render_records(records: list, title: str, columns: Optional[list] = None) -> None:
    """Print rows as a rich table."""
    if not records:
        console.print(f"[yellow]No {title} found[/yellow]")
        return

    if not columns:
        columns = [key for key in records[0].keys() if not isinstance(records[0][key], (dict, list))][:6]

    table = Table(title=f"{title} ({len(records)})")
    for column in columns:
        table.add_column(column, style="cyan" if column == "id" else None)
    for record in records:
        table.add_row(*["" if record.get(c) is None else str(record.get(c)) for c in columns])
    console.print(table)


def get_api_or_exit(ctx: click.Context):
    """Build the API, turning missing configuration into a CLI error."""
    from chapel.api import get_api
    from chapel.errors import ConfigurationError

    try:
        return get_api(admin=ctx.obj["admin"])
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="chapel")
@click.option("--admin", is_flag=True, help="Use the service role key (bypasses RLS)")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, admin: bool, verbose: bool):
    """
    Chapel - church site data administration.

    Reads SUPABASE_URL, SUPABASE_ANON_KEY and (with --admin)
    SUPABASE_SERVICE_KEY from the environment.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["admin"] = admin


@cli.command("list")
@click.argument("entity", type=click.Choice(sorted(ENTITIES)))
@click.option("--limit", "-n", type=int, help="Maximum number of rows")
@click.option("--order-by", type=str, help="Column to sort by")
@click.option("--asc/--desc", "ascending", default=None, help="Sort direction")
@click.option("--where", "-w", multiple=True, help="Equality filter as column=value")
@click.option("--columns", "-c", type=str, help="Comma-separated columns to show")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def list_records(
    ctx: click.Context,
    entity: str,
    limit: Optional[int],
    order_by: Optional[str],
    ascending: Optional[bool],
    where: tuple,
    columns: Optional[str],
    as_json: bool,
):
    """
    List rows of an entity.

    Example:

        chapel list sermons --limit 5 --columns id,title,sermon_date
    """
    from chapel.models import QueryOptions

    api = get_api_or_exit(ctx)
    options = QueryOptions(
        order_by=order_by,
        ascending=ascending,
        eq=parse_where(where),
        limit=limit,
    )
    records = getattr(api, ENTITIES[entity]).list(options)

    if as_json:
        click.echo(json.dumps(records, indent=2, default=str))
    else:
        render_records(records, entity, columns.split(",") if columns else None)


@cli.command()
@click.argument("entity", type=click.Choice(sorted(ENTITIES)))
@click.argument("record_id")
@click.pass_context
def show(ctx: click.Context, entity: str, record_id: str):
    """Show one row as JSON."""
    api = get_api_or_exit(ctx)
    record = getattr(api, ENTITIES[entity]).get_by_id(record_id)
    console.print_json(json.dumps(record, default=str))


@cli.command()
@click.pass_context
def admins(ctx: click.Context):
    """List admin profiles."""
    api = get_api_or_exit(ctx)
    render_records(api.users.list_admins(), "admins", ["id", "email", "role", "created_at"])


@cli.command()
@click.argument("user_id")
@click.pass_context
def promote(ctx: click.Context, user_id: str):
    """Give a user the admin role."""
    api = get_api_or_exit(ctx)
    record = api.users.promote_to_admin(user_id)
    console.print(f"[green]{record.get('email', user_id)} is now an admin[/green]")


@cli.command()
@click.argument("user_id")
@click.pass_context
def demote(ctx: click.Context, user_id: str):
    """Return an admin to the user role (refuses for the last admin)."""
    from chapel.errors import LastAdminError

    api = get_api_or_exit(ctx)
    try:
        record = api.users.demote_from_admin(user_id)
    except LastAdminError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print(f"[green]{record.get('email', user_id)} is now a user[/green]")


@cli.command("upload-image")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--folder", "-f", default="general", show_default=True, help="Folder inside the bucket")
@click.pass_context
def upload_image(ctx: click.Context, path: str, folder: str):
    """Upload an image file and print its public URL."""
    api = get_api_or_exit(ctx)
    url = api.storage.upload_image(path, folder=folder)
    click.echo(url)


@cli.command("delete-image")
@click.argument("url")
@click.pass_context
def delete_image(ctx: click.Context, url: str):
    """Delete an image by its public URL."""
    from chapel.errors import InvalidImageURLError

    api = get_api_or_exit(ctx)
    try:
        api.storage.delete_image(url)
    except InvalidImageURLError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print("[green]Deleted[/green]")


@cli.command()
def info():
    """Show connection configuration."""
    from chapel.db.client import get_config

    config = get_config()
    console.print(Panel(
        f"URL: {config.url or '[red]not set[/red]'}\n"
        f"Anon key: {'set' if config.anon_key else '[red]not set[/red]'}\n"
        f"Service key: {'set' if config.service_key else '[yellow]not set[/yellow]'}\n"
        f"Image bucket: {config.image_bucket}",
        title="Chapel",
        border_style="green" if config.is_configured else "red",
    ))


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
