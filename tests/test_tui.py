from docops.cli.common.output import _cell, _document_columns, _truncate
from docops.cli.tui import _MAX_DB_NAME_WIDTH, _database_choice_title
from docops.core.models import DatabaseInfo


def test_database_choice_title_aligns_counts_column():
    first = _database_choice_title(
        DatabaseInfo("shop", ("orders", "items")), empty=False, name_width=10
    )
    second = _database_choice_title(
        DatabaseInfo("draft", ("notes",)), empty=True, name_width=10
    )

    assert first.startswith("shop")
    assert second.startswith("draft")
    assert first.index("(") == second.index("(")
    assert first.endswith("(2 collections)")
    assert second.endswith("(1 collection, empty)")


def test_database_choice_title_truncates_long_names():
    long_name = "x" * (_MAX_DB_NAME_WIDTH + 10)
    rendered = _database_choice_title(
        DatabaseInfo(long_name), empty=False, name_width=_MAX_DB_NAME_WIDTH
    )

    assert "..." in rendered
    assert "(0 collections)" in rendered
    assert _truncate(long_name, _MAX_DB_NAME_WIDTH).endswith("...")


def test_document_columns_put_id_first_in_first_seen_order():
    documents = [{"name": "a", "_id": "1"}, {"total": 3, "name": "b"}]

    assert _document_columns(documents) == ["_id", "name", "total"]


def test_cell_renders_nested_values_as_json_and_escapes_markup():
    assert _cell(None) == ""
    assert _cell({"a": [1, 2]}) == '{"a": [1, 2]}'
    assert _cell("[bold]x") == "\\[bold]x"
