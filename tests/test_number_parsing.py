from __future__ import annotations

import pytest

from utils.number_parsing import parse_int_shorthand


@pytest.mark.parametrize("value,expected", [
    ("4500", 4500),
    ("1,234", 1234),
    ("1.2K", 1200),
    ("3m", 3000000),
    ("500+", 500),
    (" 2B ", 2000000000),
    ("-3", -3),
    (42, 42),
])
def test_parse_int_shorthand(value, expected):
    assert parse_int_shorthand(value) == expected


@pytest.mark.parametrize("value", [None, "", "lots", "1.2X", True])
def test_parse_int_shorthand_rejects_garbage(value):
    assert parse_int_shorthand(value) is None
