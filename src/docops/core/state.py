"""Session state stores.

Plain, explicitly owned containers for the listing, role assignments and
pagination cursors of a session. They perform no I/O and no validation; the
session controller is responsible for the values written into them.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from docops.core.models import DatabaseListing, RoleAssignment

T = TypeVar("T")


class StateCell(Generic[T]):
    """A single mutable slot with get / replace semantics."""

    def __init__(self, value: T) -> None:
        self._value = value

    def get(self) -> T:
        return self._value

    def replace(self, value: T) -> None:
        self._value = value


class ListingCache:
    """Holds the last known database listing and the caller's roles."""

    def __init__(
        self,
        listing: DatabaseListing | None = None,
        roles: RoleAssignment | None = None,
    ) -> None:
        self.listing: StateCell[DatabaseListing] = StateCell(
            listing if listing is not None else DatabaseListing()
        )
        self.roles: StateCell[RoleAssignment] = StateCell(
            roles if roles is not None else {}
        )


class PageCursorStore:
    """
    Index of the next page to fetch, per (database, collection) pair.

    Pairs that were never written read as 0. Buckets per database are created
    lazily on the first write and never removed.
    """

    def __init__(self) -> None:
        self._pages: dict[str, dict[str, int]] = {}

    def has_database(self, database: str) -> bool:
        """Return True if a cursor bucket exists for the database."""
        return database in self._pages

    def get_cursor(self, database: str, collection: str) -> int:
        return self._pages.get(database, {}).get(collection, 0)

    def set_cursor(self, value: int, database: str, collection: str) -> None:
        self._pages.setdefault(database, {})[collection] = value

    def snapshot(self) -> dict[str, dict[str, int]]:
        """Return a copy of the cursor table."""
        return {db: dict(cols) for db, cols in self._pages.items()}
