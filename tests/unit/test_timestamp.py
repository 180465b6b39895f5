"""Unit tests for strict timestamp validation and parsing.

This module tests:
- The two accepted layouts
- Rejection of every other shape
- Offset preservation in parsed values
- Formatting back into the accepted layouts
- The pydantic field type
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import BaseModel, ValidationError

from favorites_conformance.timestamp import (
    IsoTimestamp,
    TimestampLayout,
    format_timestamp,
    is_valid,
    match_layout,
    parse,
)


class TestAcceptedLayouts:
    """Tests for strings that must be accepted."""

    @pytest.mark.parametrize(
        "value",
        [
            "2024-05-20T12:34:56+03:00",
            "2024-05-20T12:34:56-03:00",
            "2024-05-20T00:00:00+00:00",
            "2024-02-29T23:59:59+14:00",
            "0001-01-01T00:00:00-14:00",
            "9999-12-31T23:59:59+05:45",
        ],
    )
    def test_seconds_layout(self, value: str) -> None:
        """Test that the seconds layout is accepted."""
        assert is_valid(value)
        assert match_layout(value) == TimestampLayout.SECONDS

    @pytest.mark.parametrize(
        "value",
        [
            "2024-05-20T12:34:56.000+03:00",
            "2024-05-20T12:34:56.789+03:00",
            "2024-05-20T12:34:56.999-09:30",
        ],
    )
    def test_milliseconds_layout(self, value: str) -> None:
        """Test that the millisecond layout is accepted."""
        assert is_valid(value)
        assert match_layout(value) == TimestampLayout.MILLISECONDS


class TestRejectedShapes:
    """Tests for strings that must be rejected."""

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "2024-05-20T12:34:56Z",
            "2024-05-20T12:34:56.789Z",
            "2024-05-20 12:34:56+03:00",
            "2024-05-20T12:34:56",
            "2024-05-20",
            "2024-05-20T12:34+03:00",
            "2024-05-20T12:34:56+0300",
            "2024-05-20T12:34:56+03",
            "2024-05-20T12:34:56.+03:00",
            "2024-05-20T12:34:56.7+03:00",
            "2024-05-20T12:34:56.78+03:00",
            "2024-05-20T12:34:56.7890+03:00",
            "2024-05-20T12:34:56.789123+03:00",
            " 2024-05-20T12:34:56+03:00",
            "2024-05-20T12:34:56+03:00 ",
            "2024-05-20T12:34:56+03:00\n",
            "2024-5-20T12:34:56+03:00",
            "24-05-20T12:34:56+03:00",
            "2024/05/20T12:34:56+03:00",
            "not a date",
            "T",
        ],
    )
    def test_rejected(self, value: str | None) -> None:
        """Test that anything but the two layouts is rejected."""
        assert not is_valid(value)
        assert parse(value) is None
        assert match_layout(value) is None

    @pytest.mark.parametrize(
        "value",
        [
            "2024-13-01T00:00:00+00:00",
            "2024-00-01T00:00:00+00:00",
            "2023-02-29T00:00:00+00:00",
            "2024-04-31T00:00:00+00:00",
            "2024-05-20T24:00:00+00:00",
            "2024-05-20T12:60:00+00:00",
            "2024-05-20T12:34:60+00:00",
            "0000-01-01T00:00:00+00:00",
        ],
    )
    def test_impossible_calendar_values(self, value: str) -> None:
        """Test that well-shaped but impossible instants are rejected."""
        assert not is_valid(value)

    @pytest.mark.parametrize(
        "value",
        [
            "2024-05-20T12:34:56+15:00",
            "2024-05-20T12:34:56-14:30",
            "2024-05-20T12:34:56+03:60",
            "2024-05-20T12:34:56+99:00",
        ],
    )
    def test_out_of_range_offsets(self, value: str) -> None:
        """Test that offsets beyond ±14:00 or with minutes > 59 are rejected."""
        assert not is_valid(value)

    def test_non_ascii_digits_rejected(self) -> None:
        """Test that non-ASCII numerals never match, whatever the locale."""
        arabic_indic = "٢٠٢٤-٠٥-٢٠T١٢:٣٤:٥٦+٠٣:٠٠"
        fullwidth = "２０２４-05-20T12:34:56+03:00"

        assert not is_valid(arabic_indic)
        assert not is_valid(fullwidth)

    def test_non_string_rejected(self) -> None:
        """Test that non-string input is invalid rather than an error."""
        assert not is_valid(20240520)  # type: ignore[arg-type]
        assert parse(b"2024-05-20T12:34:56+03:00") is None  # type: ignore[arg-type]


class TestParse:
    """Tests for parsed values."""

    def test_offset_is_preserved(self) -> None:
        """Test that the textual offset survives parsing unnormalized."""
        parsed = parse("2024-05-20T12:34:56+03:00")

        assert parsed is not None
        assert parsed.utcoffset() == timedelta(hours=3)
        assert (parsed.year, parsed.month, parsed.day) == (2024, 5, 20)
        assert (parsed.hour, parsed.minute, parsed.second) == (12, 34, 56)
        assert parsed.microsecond == 0

    def test_negative_offset_with_minutes(self) -> None:
        """Test that negative offsets keep their minutes."""
        parsed = parse("2024-05-20T12:34:56.500-04:30")

        assert parsed is not None
        assert parsed.utcoffset() == -timedelta(hours=4, minutes=30)
        assert parsed.microsecond == 500000

    def test_same_instant_different_offsets(self) -> None:
        """Test that equal instants compare equal but keep their own offsets."""
        moscow = parse("2024-05-20T12:34:56+03:00")
        utc = parse("2024-05-20T09:34:56+00:00")

        assert moscow == utc
        assert moscow.utcoffset() != utc.utcoffset()

    def test_parse_is_repeatable(self) -> None:
        """Test that parsing the same string twice gives the same value."""
        value = "2024-05-20T12:34:56.789+03:00"

        assert parse(value) == parse(value)
        assert is_valid(value) is is_valid(value)


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_seconds_layout(self) -> None:
        """Test that the seconds layout drops sub-second precision."""
        value = datetime(2024, 5, 20, 12, 34, 56, 789000, tzinfo=timezone(timedelta(hours=3)))

        assert format_timestamp(value) == "2024-05-20T12:34:56+03:00"

    def test_milliseconds_layout(self) -> None:
        """Test that the millisecond layout keeps exactly three digits."""
        value = datetime(2024, 5, 20, 12, 34, 56, 5000, tzinfo=timezone.utc)

        assert format_timestamp(value, TimestampLayout.MILLISECONDS) == "2024-05-20T12:34:56.005+00:00"

    def test_naive_datetime_raises(self) -> None:
        """Test that a naive datetime cannot be formatted."""
        with pytest.raises(ValueError, match="offset-aware"):
            format_timestamp(datetime(2024, 5, 20, 12, 34, 56))

    @pytest.mark.parametrize(
        "offset",
        [
            timedelta(hours=3, seconds=30),
            timedelta(hours=15),
            timedelta(hours=-14, minutes=-1),
        ],
    )
    def test_unwritable_offset_raises(self, offset: timedelta) -> None:
        """Test that offsets outside whole minutes within ±14:00 are refused."""
        value = datetime(2024, 5, 20, 12, 34, 56, tzinfo=timezone(offset))

        with pytest.raises(ValueError, match="offset"):
            format_timestamp(value)

    def test_extreme_offsets_formatted(self) -> None:
        """Test that ±14:00 themselves are still formatted and valid."""
        for hours in (14, -14):
            value = datetime(2024, 5, 20, 12, 34, 56, tzinfo=timezone(timedelta(hours=hours)))
            assert is_valid(format_timestamp(value))


class TestIsoTimestampField:
    """Tests for the IsoTimestamp pydantic type."""

    class Stamped(BaseModel):
        created_at: IsoTimestamp

    def test_accepts_valid_value(self) -> None:
        """Test that a valid timestamp is kept as the original string."""
        model = self.Stamped(created_at="2024-05-20T12:34:56+03:00")
        assert model.created_at == "2024-05-20T12:34:56+03:00"

    def test_rejects_invalid_value(self) -> None:
        """Test that an invalid timestamp fails model validation."""
        with pytest.raises(ValidationError, match="offset-aware timestamp"):
            self.Stamped(created_at="2024-05-20T12:34:56Z")
