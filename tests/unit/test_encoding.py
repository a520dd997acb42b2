"""Unit tests for value encodings."""

from datetime import date, datetime

import pytest

from yamlenv.encoding import encode_scalar, encode_structure


class TestEncodeScalar:
    """Tests for encode_scalar."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, "true"),
            (False, "false"),
            (None, ""),
            (0, "0"),
            (42, "42"),
            (1.5, "1.5"),
            ("text", "text"),
            (date(2017, 6, 13), "2017-06-13"),
            (datetime(2017, 6, 13, 8, 30), "2017-06-13T08:30:00"),
        ],
    )
    def test_encode(self, value: object, expected: str) -> None:
        """Test scalars render as environment strings."""
        assert encode_scalar(value) == expected


class TestEncodeStructure:
    """Tests for encode_structure."""

    @pytest.mark.unit
    def test_compact_list(self) -> None:
        """Test lists are rendered without spaces."""
        assert encode_structure([1, "two", None]) == '[1,"two",null]'

    @pytest.mark.unit
    def test_list_shaped_mapping(self) -> None:
        """Test a 0..n-1 keyed mapping renders as a list."""
        assert encode_structure({0: "a", 1: "b"}) == '["a","b"]'

    @pytest.mark.unit
    def test_dates_inside_lists(self) -> None:
        """Test dates nested in lists are rendered as ISO text."""
        assert encode_structure([date(2017, 6, 13)]) == '["2017-06-13"]'
