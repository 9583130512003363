"""Error types raised by the docops core."""

from __future__ import annotations


class DocOpsError(RuntimeError):
    """Base class for all docops runtime errors."""


class TransportError(DocOpsError):
    """Raised when a remote call fails at the network or protocol level."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class OperationError(DocOpsError):
    """Raised when the API answered, but reported that a mutation failed."""


class PageLoadInProgressError(DocOpsError):
    """Raised when a page is requested for a pair that is already loading one."""

    def __init__(self, database: str, collection: str) -> None:
        super().__init__(
            f"A page load for '{database}.{collection}' is already in progress."
        )
        self.database = database
        self.collection = collection
