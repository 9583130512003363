from docops.core.models import DatabaseInfo, DatabaseListing
from docops.core.state import ListingCache, PageCursorStore, StateCell


def test_cursor_defaults_to_zero_for_unseen_pair():
    pages = PageCursorStore()

    assert pages.get_cursor("shop", "orders") == 0
    assert pages.has_database("shop") is False


def test_set_cursor_creates_database_bucket_lazily():
    pages = PageCursorStore()
    pages.set_cursor(3, "shop", "orders")

    assert pages.has_database("shop") is True
    assert pages.get_cursor("shop", "orders") == 3
    assert pages.get_cursor("shop", "customers") == 0


def test_snapshot_is_a_copy():
    pages = PageCursorStore()
    pages.set_cursor(1, "shop", "orders")

    snap = pages.snapshot()
    snap["shop"]["orders"] = 99

    assert pages.get_cursor("shop", "orders") == 1
    assert pages.snapshot() == {"shop": {"orders": 1}}


def test_state_cell_replace_swaps_value():
    cell = StateCell(1)
    cell.replace(2)

    assert cell.get() == 2


def test_listing_cache_starts_empty():
    cache = ListingCache()

    assert cache.listing.get() == DatabaseListing()
    assert cache.roles.get() == {}


def test_listing_cache_slots_are_independent():
    cache = ListingCache()
    listing = DatabaseListing(non_empty=(DatabaseInfo("shop", ("orders",)),))

    cache.listing.replace(listing)

    assert cache.listing.get() is listing
    assert cache.roles.get() == {}


def test_listing_find_and_names():
    listing = DatabaseListing(
        non_empty=(DatabaseInfo("shop", ("orders",)),),
        empty=(DatabaseInfo("draft", ("notes",)),),
    )

    assert listing.names() == ["shop", "draft"]
    assert listing.find("draft").collections == ("notes",)
    assert listing.find("missing") is None
