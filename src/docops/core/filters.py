"""Filter construction utilities.

This module translates user intent (such as repeated `--where key=value` CLI
arguments) into the field-to-value mapping sent to the document query
endpoint. It centralizes validation so the rest of the application works with
a single, well-formed filter.
"""

from __future__ import annotations

from typing import Iterable


def build_filter(criteria: Iterable[str]) -> dict[str, str]:
    """
    Build a document filter from `key=value` criteria.

    Later criteria for the same key replace earlier ones. Whitespace around
    the key is ignored; the value is kept as given.

    Args:
        criteria: Iterable of strings in the form `key=value`.

    Returns:
        Mapping of field name to the value it must match.

    Raises:
        ValueError: If no criteria are provided, or if a criterion does not
                    follow the `key=value` format.
    """
    result: dict[str, str] = {}

    for item in criteria:
        if "=" not in item:
            raise ValueError(f"Invalid filter criterion: '{item}' (expected key=value)")

        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid filter criterion: '{item}' (empty key)")

        result[key] = value

    if not result:
        raise ValueError("At least one criterion is required (--where key=value)")

    return result
