"""
Unit tests for Color conversions.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from core.utils import UserInputError
from gsheets.colors import Color


def test_from_sheets_color_defaults_missing_channels():
    assert Color.from_sheets_color({"red": 1}) == Color(1.0, 0.0, 0.0, 1.0)
    assert Color.from_sheets_color({}) == Color(0.0, 0.0, 0.0, 1.0)
    assert Color.from_sheets_color(None) is None


def test_to_sheets_color_has_all_channels():
    assert Color(0.1, 0.2, 0.3, 0.4).to_sheets_color() == {
        "red": 0.1,
        "green": 0.2,
        "blue": 0.3,
        "alpha": 0.4,
    }


@pytest.mark.parametrize("value", ["#FF0000", "ff0000", " #ff0000 "])
def test_from_hex(value):
    assert Color.from_hex(value) == Color(1.0, 0.0, 0.0, 1.0)


@pytest.mark.parametrize("value", ["#FFF", "#GG0000", ""])
def test_from_hex_rejects_invalid(value):
    with pytest.raises(UserInputError):
        Color.from_hex(value)


def test_to_hex_clamps():
    assert Color(1.0, 0.5, 0.5).to_hex() == "#FF8080"
    assert Color(2.0, -1.0, 0.0).to_hex() == "#FF0000"
