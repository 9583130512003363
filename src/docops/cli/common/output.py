"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from docops.cli.common.tui_style import (
    QUESTIONARY_STYLE_CONFIRM,
    QUESTIONARY_STYLE_SELECT,
)
from docops.core.models import DatabaseListing, Document, RoleAssignment

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

_MAX_CELL_WIDTH = 40
_MAX_DOCUMENT_COLUMNS = 6

console = Console(theme=_THEME)


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _cell(value: Any) -> str:
    """Render one document field for a table cell."""
    if value is None:
        return ""
    if isinstance(value, str):
        text = value
    else:
        text = json.dumps(value, default=str, ensure_ascii=False)
    return escape(_truncate(text, _MAX_CELL_WIDTH))


def _document_columns(documents: Iterable[Document]) -> list[str]:
    """Union of field names in first-seen order, with `_id` first when present."""
    columns: list[str] = []
    for doc in documents:
        for key in doc:
            if key not in columns:
                columns.append(key)
    if "_id" in columns:
        columns.remove("_id")
        columns.insert(0, "_id")
    return columns


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be DOC-OPS consistent."""
        return f"[DOC-OPS] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while a remote call is in flight."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def select_one(self, message: str, choices: list[Any]) -> Any | None:
        """
        Prompt the user to select a single item from a list (radio list).

        Choices may be plain strings or `questionary.Choice` objects.

        Returns:
            The selected value, or None if cancelled.
        """
        if not choices:
            return None

        prompt = self._q_try(
            questionary.select,
            self._q(message),
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓ then Enter",
            pointer="❯",
        )
        return prompt.ask()

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def databases_table(self, listing: DatabaseListing, title: str = "Databases") -> None:
        """Render both listing groups; implied databases are marked as empty."""
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="ok", no_wrap=True)
        t.add_column("State")
        t.add_column("Collections", style="meta")
        t.add_column("Size", style="meta", justify="right")

        groups = (
            (listing.non_empty, "[ok]non-empty[/]"),
            (listing.empty, "[warn]empty[/]"),
        )
        for group, state in groups:
            for db in group:
                size = "" if db.size_on_disk is None else str(db.size_on_disk)
                t.add_row(escape(db.name), state, escape(", ".join(db.collections)), size)

        console.print(t)

    def roles_table(self, roles: RoleAssignment, title: str = "Roles") -> None:
        """Render the roles held by the caller on each database."""
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="ok", no_wrap=True)
        t.add_column("Roles")

        for database in sorted(roles):
            t.add_row(escape(database), escape(", ".join(sorted(roles[database]))))

        console.print(t)

    def documents_table(
        self, documents: list[Document], title: str = "Documents"
    ) -> None:
        """
        Render documents as rows, one column per field.

        Only the first few fields are shown; the caption reports how many
        were left out. Nested values are rendered as compact JSON.
        """
        columns = _document_columns(documents)
        shown = columns[:_MAX_DOCUMENT_COLUMNS]

        t = Table(title=title, show_lines=False)
        for column in shown:
            t.add_column(escape(column), style="ok" if column == "_id" else None)
        hidden = len(columns) - len(shown)
        if hidden > 0:
            t.caption = f"{hidden} more field(s) not shown"

        for doc in documents:
            t.add_row(*[_cell(doc.get(column)) for column in shown])

        console.print(t)


out = Out()
