from decimal import Decimal

import pytest

from cellview.parsing import NOT_JSON, is_candidate, parse_json, try_parse


def test_parses_object():
    assert try_parse('{"a": 1, "b": [true, null, "x"]}') == {"a": 1, "b": [True, None, "x"]}


def test_parses_array_with_surrounding_whitespace():
    assert try_parse('  \n[1, 2]\t ') == [1, 2]


def test_keeps_number_precision():
    value = try_parse('{"price": 0.1000000000000000055511151231257827, "n": 12345678901234567890}')
    assert value["price"] == Decimal("0.1000000000000000055511151231257827")
    assert value["n"] == 12345678901234567890


def test_duplicate_keys_last_value_wins():
    assert try_parse('{"a": 1, "a": 2}') == {"a": 2}


def test_key_order_is_preserved():
    assert list(try_parse('{"z": 1, "a": 2, "m": 3}')) == ["z", "a", "m"]


@pytest.mark.parametrize(
    "text",
    [
        "not json at all",
        "",
        "42",
        '"string"',
        "null",
        '{"a": 1',
        '[1, 2}',
        '{"a": 1}...',
        "{'a': 1}",
    ],
)
def test_non_candidates_and_invalid_text_are_not_json(text):
    assert try_parse(text) is NOT_JSON


def test_syntax_error_inside_candidate():
    assert try_parse('{"a": }') is NOT_JSON


def test_trailing_data_is_rejected():
    assert try_parse('{"a": 1} {"b": 2}') is NOT_JSON


def test_not_json_is_falsy_and_distinct_from_null():
    assert not NOT_JSON
    assert parse_json("null") is None
    assert parse_json("null") is not NOT_JSON


def test_candidacy_check():
    assert is_candidate(' {"a": 1} ')
    assert is_candidate("[]")
    assert not is_candidate('{"a": 1]')
    assert not is_candidate("x{}")
