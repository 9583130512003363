"""Commands for listing, creating and dropping databases."""

import typer

from docops.cli.common.context import SessionAppContext, build_session_context
from docops.cli.common.exits import exit_from_api_error, ok_exit, warn_exit
from docops.cli.common.options import ApiUrlOpt, DryRunOpt, TokenOpt, YesOpt
from docops.cli.common.output import out
from docops.cli.tui import select_database
from docops.core.errors import OperationError, TransportError

db_app = typer.Typer(
    help="List, create and drop databases.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@db_app.callback()
def _init(
    ctx: typer.Context,
    api_url: str | None = ApiUrlOpt,
    token: str | None = TokenOpt,
):
    """Initialize the database session context."""
    ctx.obj = build_session_context(api_url, token)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def _show_listing(appctx: SessionAppContext, title: str = "Databases") -> None:
    listing = appctx.session.listing
    out.header(title)
    out.info(f"Non-empty: {len(listing.non_empty)} | Empty: {len(listing.empty)}")
    out.databases_table(listing, title=title)


@db_app.command("list")
def list_databases(ctx: typer.Context):
    """List databases and their collections."""
    appctx: SessionAppContext = ctx.obj

    try:
        with out.status("Loading databases..."):
            listing = appctx.session.refresh_listing()
    except TransportError as exc:
        exit_from_api_error(exc, action="Loading databases")

    if not listing.names():
        warn_exit("No databases found.")

    _show_listing(appctx)


@db_app.command("roles")
def roles(ctx: typer.Context):
    """Show the roles you hold on each database."""
    appctx: SessionAppContext = ctx.obj

    try:
        with out.status("Loading roles..."):
            assigned = appctx.session.refresh_roles()
    except TransportError as exc:
        exit_from_api_error(exc, action="Loading roles")

    if not assigned:
        warn_exit("No roles assigned.")

    out.header("Roles")
    out.roles_table(assigned, title="Assigned roles")


@db_app.command("create")
def create(
    ctx: typer.Context,
    database: str = typer.Argument(..., help="Name of the new database"),
    collection: str = typer.Argument(..., help="Name of its first collection"),
):
    """
    Create a new, empty database.

    The database is implied and only materialized once its first document is
    inserted.
    """
    appctx: SessionAppContext = ctx.obj

    try:
        with out.status("Creating database..."):
            appctx.session.create_database(database, collection)
    except TransportError as exc:
        exit_from_api_error(exc, action=f"Creating database '{database}'")

    out.success(f"Database '{database}' created with collection '{collection}'.")
    _show_listing(appctx)


@db_app.command("drop")
def drop(
    ctx: typer.Context,
    database: str | None = typer.Argument(
        None, help="Database to drop (pick interactively if omitted)"
    ),
    dry_run: bool = DryRunOpt,
    yes: bool = YesOpt,
):
    """Drop a database and all of its collections."""
    appctx: SessionAppContext = ctx.obj
    session = appctx.session

    if database is None:
        try:
            with out.status("Loading databases..."):
                listing = session.refresh_listing()
        except TransportError as exc:
            exit_from_api_error(exc, action="Loading databases")
        database = select_database(listing, "Select a database to drop:")
        if not database:
            warn_exit("No database selected.")

    out.kv({"Database to drop": database})

    if dry_run:
        warn_exit("DRY RUN: no changes will be made.")

    if not yes and not out.confirm(f"Proceed with dropping database '{database}'?"):
        ok_exit("Cancelled.")

    try:
        with out.status("Dropping database..."):
            session.drop_database(database)
    except (OperationError, TransportError) as exc:
        exit_from_api_error(exc, action=f"Dropping database '{database}'")

    out.success(f"Database '{database}' dropped.")
    _show_listing(appctx)
