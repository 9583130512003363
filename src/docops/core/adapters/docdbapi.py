from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, TypeVar

import requests

from docops.core.errors import TransportError
from docops.core.models import (
    DatabaseInfo,
    DatabaseListing,
    Document,
    MutationResult,
    RoleAssignment,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _collection_name(item: Any) -> str | None:
    """Collections are listed either as plain names or as `{"name": ...}` objects."""
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        name = item.get("name")
        return str(name) if name else None
    return None


def _parse_database(item: Any) -> DatabaseInfo:
    if not isinstance(item, Mapping) or not item.get("name"):
        raise ValueError(f"unexpected database entry: {item!r}")
    collections = [_collection_name(c) for c in item.get("collections") or []]
    size = item.get("sizeOnDisk")
    return DatabaseInfo(
        name=str(item["name"]),
        collections=tuple(c for c in collections if c),
        size_on_disk=int(size) if isinstance(size, (int, float)) else None,
    )


def _parse_databases(items: Any) -> list[DatabaseInfo]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"expected a list of databases, got {type(items).__name__}")
    return [_parse_database(item) for item in items]


def _parse_documents(payload: Any) -> list[Document]:
    if not isinstance(payload, list):
        raise ValueError(f"expected a list of documents, got {type(payload).__name__}")
    documents: list[Document] = []
    for doc in payload:
        if not isinstance(doc, Mapping):
            raise ValueError(f"expected document objects, got {type(doc).__name__}")
        documents.append(dict(doc))
    return documents


class DocDbApiAdapter:
    """Adapter around the document database HTTP API (listing, roles, documents)."""

    def __init__(
        self,
        session: requests.Session,
        *,
        base_url: str,
        timeout: float = 30.0,
    ) -> None:
        self.session = session
        self.base_url = base_url
        self.timeout = timeout

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform one API call and return the decoded JSON payload."""
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                params=dict(params) if params else None,
                json=dict(body) if body is not None else None,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as exc:
            raise TransportError(f"Cannot connect to {self.base_url}", url=url) from exc
        except requests.exceptions.Timeout as exc:
            raise TransportError(f"Request to {url} timed out", url=url) from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc

        if not resp.ok:
            raise TransportError(
                f"{method} {endpoint} failed with HTTP {resp.status_code}",
                url=url,
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(
                f"{method} {endpoint} returned a non-JSON response",
                url=url,
                status_code=resp.status_code,
            ) from exc

    def _decode(self, endpoint: str, parse: Callable[[Any], T], payload: Any) -> T:
        """Apply a payload parser, reporting shape mismatches as transport errors."""
        try:
            return parse(payload)
        except (TypeError, ValueError) as exc:
            raise TransportError(
                f"Unexpected response from {endpoint}: {exc}",
                url=f"{self.base_url}{endpoint}",
            ) from exc

    def _mutation(self, endpoint: str, body: Mapping[str, Any]) -> MutationResult:
        payload = self._request("POST", endpoint, body=body)

        def parse(p: Any) -> MutationResult:
            if not isinstance(p, Mapping) or "detail" not in p:
                raise ValueError("missing 'detail'")
            return MutationResult(detail=str(p["detail"]))

        return self._decode(endpoint, parse, payload)

    def list_databases(self) -> DatabaseListing:
        """Return databases split into non-empty and implied (empty) groups."""
        payload = self._request("GET", "/db")

        def parse(p: Any) -> DatabaseListing:
            if not isinstance(p, Mapping):
                raise ValueError("expected an object with 'nonEmpty' and 'empty'")
            return DatabaseListing(
                non_empty=tuple(_parse_databases(p.get("nonEmpty"))),
                empty=tuple(_parse_databases(p.get("empty"))),
            )

        return self._decode("/db", parse, payload)

    def list_roles(self) -> RoleAssignment:
        """Return the roles the current caller holds on each database."""
        payload = self._request("GET", "/db/roles")

        def parse(p: Any) -> RoleAssignment:
            if not isinstance(p, Mapping):
                raise ValueError("expected an object mapping databases to roles")
            roles: RoleAssignment = {}
            for db, held in p.items():
                if held is None:
                    held = []
                if not isinstance(held, list):
                    raise ValueError(f"expected a list of roles for '{db}'")
                roles[str(db)] = frozenset(str(r) for r in held)
            return roles

        return self._decode("/db/roles", parse, payload)

    def create_database(self, database: str, collection: str) -> list[DatabaseInfo]:
        """Register an implied database; returns the updated empty group."""
        payload = self._request(
            "POST", "/db/create", body={"database": database, "collection": collection}
        )
        return self._decode("/db/create", _parse_databases, payload)

    def drop_database(self, database: str) -> MutationResult:
        """Request a database drop."""
        return self._mutation("/db/drop", {"database": database})

    def create_collection(self, database: str, collection: str) -> MutationResult:
        """Request a new collection in an existing database."""
        return self._mutation(
            "/collection/create", {"database": database, "collection": collection}
        )

    def get_documents_page(
        self, database: str, collection: str, page: int
    ) -> list[Document]:
        """Return one page of documents of a collection."""
        payload = self._request(
            "GET",
            "/collection/documents",
            params={"database": database, "collection": collection, "page": page},
        )
        return self._decode("/collection/documents", _parse_documents, payload)

    def find_documents(
        self, database: str, collection: str, filter: Mapping[str, str]
    ) -> list[Document]:
        """Return documents of a collection matching the filter."""
        payload = self._request(
            "POST",
            "/documents/find",
            body={"database": database, "collection": collection, "filter": dict(filter)},
        )
        return self._decode("/documents/find", _parse_documents, payload)
