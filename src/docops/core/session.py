"""Session controller for browsing and mutating a document database.

This module composes the session state stores with a transport client. It
implements listing refresh, mutation-then-refresh and bidirectional paged
document retrieval. It is intentionally free of CLI concerns (output, prompts,
confirmation) so it can be reused by different frontends (CLI, automation,
tests).
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Mapping, Protocol

from docops.core.errors import OperationError, PageLoadInProgressError
from docops.core.models import (
    DatabaseInfo,
    DatabaseListing,
    Document,
    MutationResult,
    RoleAssignment,
    Side,
)
from docops.core.state import ListingCache, PageCursorStore

logger = logging.getLogger(__name__)

DROP_DATABASE_FAILED = "Error occurred while dropping the database"
CREATE_COLLECTION_FAILED = "Error occurred while creating the collection"


class TransportClient(Protocol):
    """Interface for the remote API calls used by the session controller.

    Every method raises TransportError when the call fails.
    """

    def list_databases(self) -> DatabaseListing:
        """Return the current listing split into non-empty / empty groups."""
        ...

    def list_roles(self) -> RoleAssignment:
        """Return the roles the caller holds, per database."""
        ...

    def create_database(self, database: str, collection: str) -> list[DatabaseInfo]:
        """Register an implied database and return the updated empty group."""
        ...

    def drop_database(self, database: str) -> MutationResult:
        """Request a database drop."""
        ...

    def create_collection(self, database: str, collection: str) -> MutationResult:
        """Request a new collection."""
        ...

    def get_documents_page(
        self, database: str, collection: str, page: int
    ) -> list[Document]:
        """Return the documents of one page of a collection."""
        ...

    def find_documents(
        self, database: str, collection: str, filter: Mapping[str, str]
    ) -> list[Document]:
        """Return the documents matching a filter."""
        ...


class DbSessionController:
    """
    Coordinates remote calls with the listing cache and the cursor store.

    State stores are owned by the controller instance (or passed in by the
    caller); nothing is shared globally. Each store write is a single
    replacement performed after the remote call has returned, so a failed call
    never leaves a store partially updated.
    """

    def __init__(
        self,
        client: TransportClient,
        *,
        cache: ListingCache | None = None,
        pages: PageCursorStore | None = None,
        full_refresh_on_create: bool = False,
    ) -> None:
        """
        Create a session controller.

        Args:
            client: Transport used for every remote call.
            cache: Listing / roles cache. A fresh one is created if omitted.
            pages: Cursor store. A fresh one is created if omitted.
            full_refresh_on_create: Resync the whole listing after
                `create_database` instead of merging the returned empty group.
        """
        self.client = client
        self.cache = cache if cache is not None else ListingCache()
        self.pages = pages if pages is not None else PageCursorStore()
        self.full_refresh_on_create = full_refresh_on_create
        self._busy: set[tuple[str, str]] = set()
        self._busy_lock = threading.Lock()

    @property
    def listing(self) -> DatabaseListing:
        return self.cache.listing.get()

    @property
    def roles(self) -> RoleAssignment:
        return self.cache.roles.get()

    def set_listing(self, value: DatabaseListing) -> None:
        """Replace the cached database listing."""
        logger.debug(
            "Listing replaced: %d non-empty, %d empty",
            len(value.non_empty),
            len(value.empty),
        )
        self.cache.listing.replace(value)

    def set_roles(self, value: RoleAssignment) -> None:
        """Replace the cached role assignments."""
        logger.debug("Roles replaced for %d database(s)", len(value))
        self.cache.roles.replace(value)

    def set_page(self, value: int, database: str, collection: str) -> None:
        """
        Set the next page to fetch for a (database, collection) pair.

        Raises:
            ValueError: If `value` is negative.
        """
        if value < 0:
            raise ValueError(f"Page index must be >= 0, got {value}")
        self.pages.set_cursor(value, database, collection)

    def refresh_listing(self) -> DatabaseListing:
        """Fetch the database listing and replace the cached one."""
        listing = self.client.list_databases()
        self.set_listing(listing)
        return listing

    def refresh_roles(self) -> RoleAssignment:
        """Fetch the caller's role assignments and replace the cached ones."""
        roles = self.client.list_roles()
        self.set_roles(roles)
        return roles

    def create_database(self, database: str, collection: str) -> DatabaseListing:
        """
        Create a new, implied database seeded with one collection.

        The database is only materialized server-side once its first document
        is inserted. The response carries the updated empty group, which is
        merged with the previously known non-empty group; that group is only
        as fresh as the last `refresh_listing`.

        Args:
            database: Name of the new database.
            collection: Name of its first collection.

        Returns:
            The listing stored after the call.
        """
        empty = self.client.create_database(database, collection)

        if self.full_refresh_on_create:
            return self.refresh_listing()

        listing = DatabaseListing(non_empty=self.listing.non_empty, empty=tuple(empty))
        self.set_listing(listing)
        return listing

    def drop_database(self, database: str) -> DatabaseListing:
        """
        Drop a database and resync the listing.

        Raises:
            OperationError: If the API reports that the drop failed. The
                            cached listing is left unchanged.
        """
        result = self.client.drop_database(database)

        if not result.ok:
            logger.warning("Drop of database '%s' failed: %s", database, result.detail)
            raise OperationError(DROP_DATABASE_FAILED)

        return self.refresh_listing()

    def create_collection(self, database: str, collection: str) -> DatabaseListing:
        """
        Create a collection and resync the listing.

        A new collection may move its database between the listing groups, so
        the whole listing is fetched again rather than patched locally.

        Raises:
            OperationError: If the API reports that the creation failed.
        """
        result = self.client.create_collection(database, collection)

        if not result.ok:
            logger.warning(
                "Creation of collection '%s.%s' failed: %s",
                database,
                collection,
                result.detail,
            )
            raise OperationError(CREATE_COLLECTION_FAILED)

        return self.refresh_listing()

    @contextmanager
    def _loading(self, database: str, collection: str) -> Iterator[None]:
        """Mark a pair as busy for the duration of one page load."""
        key = (database, collection)
        with self._busy_lock:
            if key in self._busy:
                raise PageLoadInProgressError(database, collection)
            self._busy.add(key)
        try:
            yield
        finally:
            with self._busy_lock:
                self._busy.discard(key)

    def find_documents_in_page(
        self,
        database: str,
        collection: str,
        side: Side | str,
    ) -> list[Document]:
        """
        Fetch the next page of documents for one side of an infinite scroll.

        The cursor advances after a non-empty page on the end side and
        retreats on the start side while it is above zero. It is never
        touched when the fetch fails.

        Args:
            database: Name of the database.
            collection: Name of the collection.
            side: The side of the infinite scroll being loaded.

        Returns:
            The documents of the fetched page (possibly empty).

        Raises:
            ValueError: If `side` is not a known side.
            PageLoadInProgressError: If a page for the same pair is still loading.
        """
        side = Side(side)

        with self._loading(database, collection):
            if self.pages.has_database(database):
                next_page = self.pages.get_cursor(database, collection)
            else:
                next_page = 0
                self.set_page(0, database, collection)

            logger.debug(
                "Loading page %d of %s.%s (%s)",
                next_page,
                database,
                collection,
                side.value,
            )
            documents = self.client.get_documents_page(database, collection, next_page)

            if side is Side.END and len(documents) > 0:
                self.set_page(next_page + 1, database, collection)
            elif side is Side.START and next_page - 1 >= 0:
                self.set_page(next_page - 1, database, collection)

        return documents

    def find_documents(
        self,
        database: str,
        collection: str,
        filter: Mapping[str, str],
    ) -> list[Document]:
        """
        Find documents that match a filter in the given collection.

        Args:
            database: Name of the database.
            collection: Name of the collection.
            filter: Field name to match value.

        Returns:
            Documents that match the filter.
        """
        return self.client.find_documents(database, collection, dict(filter))
