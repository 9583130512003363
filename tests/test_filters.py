import pytest

from docops.core.filters import build_filter


def test_build_filter_single_criterion():
    assert build_filter(["status=open"]) == {"status": "open"}


def test_build_filter_keeps_equals_in_value():
    assert build_filter(["expr=a=b"]) == {"expr": "a=b"}


def test_build_filter_last_value_wins():
    assert build_filter(["status=open", " status =closed"]) == {"status": "closed"}


@pytest.mark.parametrize("value", ["broken", "=open"])
def test_build_filter_invalid_criterion(value: str):
    with pytest.raises(ValueError, match="Invalid filter criterion"):
        build_filter([value])


def test_build_filter_requires_at_least_one_criterion():
    with pytest.raises(ValueError, match="At least one criterion"):
        build_filter([])
