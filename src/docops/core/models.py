"""Core domain models for document database sessions.

These models represent databases, role assignments and mutation outcomes in a
simple, immutable form. They are intentionally free of HTTP/transport types and
UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

Document = dict[str, Any]
RoleAssignment = dict[str, frozenset[str]]


@dataclass(frozen=True)
class DatabaseInfo:
    """
    Represents a database known to the remote API.

    Attributes:
        name: Name of the database.
        collections: Names of the collections inside the database.
        size_on_disk: Size reported by the server, if any. Implied databases
                      that have no documents yet report nothing.
    """

    name: str
    collections: tuple[str, ...] = ()
    size_on_disk: int | None = None


@dataclass(frozen=True)
class DatabaseListing:
    """
    Last known set of databases, split into two groups.

    Attributes:
        non_empty: Databases that contain at least one collection with documents.
        empty: Implied databases, created but not yet backed by a document.

    A database name appears in at most one of the two groups. The listing is
    always replaced as a whole, never patched in place.
    """

    non_empty: tuple[DatabaseInfo, ...] = field(default_factory=tuple)
    empty: tuple[DatabaseInfo, ...] = field(default_factory=tuple)

    def names(self) -> list[str]:
        """Return all database names, non-empty group first."""
        return [db.name for db in (*self.non_empty, *self.empty)]

    def find(self, name: str) -> DatabaseInfo | None:
        """Return the database with the given name, or None if unknown."""
        for db in (*self.non_empty, *self.empty):
            if db.name == name:
                return db
        return None


class Side(str, Enum):
    """
    Direction of an infinite-scroll load.

    Values:
        END: Appending further pages.
        START: Loading earlier pages.
    """

    END = "end"
    START = "start"


@dataclass(frozen=True)
class MutationResult:
    """Outcome reported by the API for drop / create-collection requests."""

    detail: str

    @property
    def ok(self) -> bool:
        return self.detail == "ok"
