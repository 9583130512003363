from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from docops.core.errors import TransportError  # noqa: E402
from docops.core.models import DatabaseInfo, DatabaseListing, MutationResult  # noqa: E402


class StubTransport:
    """In-memory TransportClient recording every call it receives."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.listings: list[DatabaseListing] = []
        self.roles: dict[str, frozenset[str]] = {}
        self.created_empty: list[DatabaseInfo] = []
        self.drop_detail = "ok"
        self.collection_detail = "ok"
        self.documents: dict[tuple[str, str, int], list[dict]] = {}
        self.found: list[dict] = []
        self.failing: set[str] = set()

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.failing:
            raise TransportError(f"{name} failed", url=f"http://test/{name}")

    def list_databases(self) -> DatabaseListing:
        self._record("list_databases")
        return self.listings.pop(0) if self.listings else DatabaseListing()

    def list_roles(self):
        self._record("list_roles")
        return self.roles

    def create_database(self, database, collection):
        self._record("create_database", database, collection)
        return list(self.created_empty)

    def drop_database(self, database):
        self._record("drop_database", database)
        return MutationResult(detail=self.drop_detail)

    def create_collection(self, database, collection):
        self._record("create_collection", database, collection)
        return MutationResult(detail=self.collection_detail)

    def get_documents_page(self, database, collection, page):
        self._record("get_documents_page", database, collection, page)
        return list(self.documents.get((database, collection, page), []))

    def find_documents(self, database, collection, filter):
        self._record("find_documents", database, collection, dict(filter))
        return list(self.found)

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()
