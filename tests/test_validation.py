import pytest

from services.validation import (
    InvalidParameterError,
    missing_value_fields,
    parse_descending,
    parse_limit,
    parse_order_by,
)


def test_missing_value_fields_treats_none_as_present() -> None:
    payload = {"value1": None, "value2": 0, "value4": ""}

    assert missing_value_fields(payload) == ["value3", "value5"]


def test_parse_limit_defaults_and_parses() -> None:
    assert parse_limit(None, 50) == 50
    assert parse_limit("  ", 100) == 100
    assert parse_limit(" 7 ", 50) == 7


@pytest.mark.parametrize("value", ["abc", "1.5", "0", "-3"])
def test_parse_limit_rejects_invalid(value: str) -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        parse_limit(value, 50)

    assert excinfo.value.parameter == "limit"


def test_parse_order_by_allows_known_fields() -> None:
    assert parse_order_by(None) == "createdAt"
    assert parse_order_by("value3") == "value3"
    assert parse_order_by("timestamp") == "timestamp"


def test_parse_order_by_rejects_unknown_field() -> None:
    with pytest.raises(InvalidParameterError) as excinfo:
        parse_order_by("__name__")

    assert excinfo.value.parameter == "orderBy"
    assert "createdAt" in (excinfo.value.allowed or [])


def test_parse_descending() -> None:
    assert parse_descending(None) is True
    assert parse_descending("desc") is True
    assert parse_descending("ASC") is False

    with pytest.raises(InvalidParameterError) as excinfo:
        parse_descending("up")
    assert excinfo.value.allowed == ["asc", "desc"]
