"""Commands for creating collections and reading their documents."""

import typer

from docops.cli.common.context import SessionAppContext, build_session_context
from docops.cli.common.exits import die, exit_from_api_error, ok_exit, warn_exit
from docops.cli.common.options import ApiUrlOpt, PagesOpt, TokenOpt, WhereOpt
from docops.cli.common.output import out
from docops.cli.tui import (
    QUIT,
    select_collection,
    select_database,
    select_scroll_action,
)
from docops.core.errors import (
    OperationError,
    PageLoadInProgressError,
    TransportError,
)
from docops.core.filters import build_filter
from docops.core.models import Document, Side
from docops.core.session import DbSessionController

collection_app = typer.Typer(
    help="Create collections, page through and search their documents.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@collection_app.callback()
def _init(
    ctx: typer.Context,
    api_url: str | None = ApiUrlOpt,
    token: str | None = TokenOpt,
):
    """Initialize the collection session context."""
    ctx.obj = build_session_context(api_url, token)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def _resolve_target_or_exit(
    session: DbSessionController,
    database: str | None,
    collection: str | None,
) -> tuple[str, str]:
    """Fill in a missing database / collection through the pickers."""
    if database and collection:
        return database, collection

    try:
        with out.status("Loading databases..."):
            listing = session.refresh_listing()
    except TransportError as exc:
        exit_from_api_error(exc, action="Loading databases")

    database = database or select_database(listing)
    if not database:
        warn_exit("No database selected.")

    db = listing.find(database)
    if db is None:
        die(f"Database '{database}' does not exist.", code=1)

    collection = collection or select_collection(db)
    if not collection:
        warn_exit("No collection selected.")

    return database, collection


def _load_page(
    session: DbSessionController, database: str, collection: str, side: Side
) -> tuple[int, list[Document]]:
    """Load one page for a scroll side; returns the page index and its documents."""
    page = session.pages.get_cursor(database, collection)
    try:
        with out.status(f"Loading page {page}..."):
            documents = session.find_documents_in_page(database, collection, side)
    except (PageLoadInProgressError, TransportError) as exc:
        exit_from_api_error(exc, action=f"Loading page {page} of '{database}.{collection}'")
    return page, documents


@collection_app.command("create")
def create(
    ctx: typer.Context,
    database: str = typer.Argument(..., help="Database to add the collection to"),
    collection: str = typer.Argument(..., help="Name of the new collection"),
):
    """Create a new collection in a database."""
    appctx: SessionAppContext = ctx.obj

    try:
        with out.status("Creating collection..."):
            listing = appctx.session.create_collection(database, collection)
    except (OperationError, TransportError) as exc:
        exit_from_api_error(exc, action=f"Creating collection '{database}.{collection}'")

    out.success(f"Collection '{collection}' created in '{database}'.")
    out.databases_table(listing, title="Databases")


@collection_app.command("browse")
def browse(
    ctx: typer.Context,
    database: str | None = typer.Argument(None, help="Database name"),
    collection: str | None = typer.Argument(None, help="Collection name"),
    pages: int | None = PagesOpt,
):
    """
    Page through the documents of a collection.

    Without --pages this is an interactive infinite scroll: load the next or
    the previous page until you quit.
    """
    appctx: SessionAppContext = ctx.obj
    session = appctx.session
    database, collection = _resolve_target_or_exit(session, database, collection)
    target = f"{database}.{collection}"

    if pages is not None:
        loaded = 0
        for _ in range(pages):
            page, documents = _load_page(session, database, collection, Side.END)
            if not documents:
                out.info(f"Page {page} is empty: end of '{target}' reached.")
                break
            out.documents_table(documents, title=f"{target} | page {page}")
            loaded += len(documents)
        ok_exit(f"Loaded {loaded} document(s) from '{target}'.")

    while True:
        action = select_scroll_action(session.pages.get_cursor(database, collection))
        if action is None or action == QUIT:
            ok_exit("Done.")

        page, documents = _load_page(session, database, collection, Side(action))
        if not documents:
            out.warn(f"Page {page} of '{target}' is empty.")
            continue
        out.documents_table(documents, title=f"{target} | page {page}")


@collection_app.command("find")
def find(
    ctx: typer.Context,
    database: str = typer.Argument(..., help="Database name"),
    collection: str = typer.Argument(..., help="Collection name"),
    where: list[str] = WhereOpt,
):
    """Find documents matching field=value criteria."""
    appctx: SessionAppContext = ctx.obj

    try:
        filter_ = build_filter(where)
    except ValueError as exc:
        die(str(exc), code=2)

    try:
        with out.status("Searching documents..."):
            documents = appctx.session.find_documents(database, collection, filter_)
    except TransportError as exc:
        exit_from_api_error(exc, action=f"Searching '{database}.{collection}'")

    if not documents:
        warn_exit("No documents matched.")

    out.header("Matched documents")
    out.kv({"Filter": ", ".join(f"{k}={v}" for k, v in filter_.items())})
    out.documents_table(documents, title=f"Matched documents ({len(documents)})")
