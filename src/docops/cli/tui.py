"""Terminal UI utilities for picking databases and collections."""

from __future__ import annotations

import questionary

from docops.cli.common.output import _truncate, out
from docops.core.models import DatabaseInfo, DatabaseListing, Side

_MAX_DB_NAME_WIDTH = 48

QUIT = "quit"


def _database_choice_title(db: DatabaseInfo, *, empty: bool, name_width: int) -> str:
    """Format one database choice as `<name>  (<n> collections[, empty])`."""
    short_name = _truncate(db.name, _MAX_DB_NAME_WIDTH)
    count = len(db.collections)
    suffix = f"{count} collection{'s' if count != 1 else ''}"
    if empty:
        suffix = f"{suffix}, empty"
    return f"{short_name.ljust(name_width)}  ({suffix})"


def select_database(
    listing: DatabaseListing, message: str = "Select a database:"
) -> str | None:
    """Prompt for one database of the listing; returns its name or None."""
    groups = [(db, False) for db in listing.non_empty]
    groups += [(db, True) for db in listing.empty]
    name_width = max(
        (len(_truncate(db.name, _MAX_DB_NAME_WIDTH)) for db, _ in groups), default=0
    )
    choices = [
        questionary.Choice(
            title=_database_choice_title(db, empty=empty, name_width=name_width),
            value=db.name,
        )
        for db, empty in groups
    ]
    return out.select_one(message, choices)


def select_collection(db: DatabaseInfo) -> str | None:
    """Prompt for one collection of a database; returns its name or None."""
    return out.select_one(f"Select a collection in '{db.name}':", list(db.collections))


def select_scroll_action(page: int) -> Side | str | None:
    """
    Ask which side of the scroll to load next.

    Returns:
        Side.END, Side.START, QUIT, or None if the prompt was cancelled.
    """
    choices = [
        questionary.Choice(title=f"Next page (page {page})", value=Side.END),
        questionary.Choice(title="Previous page", value=Side.START),
        questionary.Choice(title="Quit", value=QUIT),
    ]
    return out.select_one("Load:", choices)
