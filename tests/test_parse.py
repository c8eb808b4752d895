import re
from datetime import datetime as py_datetime

import pytest
from hypothesis import given
from hypothesis.strategies import datetimes, integers, text

from dtt import (
    DateTime,
    DateTimeError,
    InvalidFieldError,
    InvalidFormatError,
    OutOfRangeError,
    UtcOffset,
    Weekday,
)
from dtt._parse import compile_pattern


class TestFormatIso:
    @pytest.mark.parametrize(
        "d, common, rfc3339",
        [
            (
                DateTime(2020, 8, 15, 23, 12, 9),
                "2020-08-15T23:12:09+00:00",
                "2020-08-15T23:12:09Z",
            ),
            (
                DateTime(2020, 8, 15, 23, 12, 9, microsecond=987_654, offset="IST"),
                "2020-08-15T23:12:09.987654+05:30",
                "2020-08-15T23:12:09.987654+05:30",
            ),
            (
                DateTime(2020, 8, 15, 23, 12, 9, microsecond=5, offset="EST"),
                "2020-08-15T23:12:09.000005-05:00",
                "2020-08-15T23:12:09.000005-05:00",
            ),
            (
                DateTime(2020, 8, 15, offset=UtcOffset(-3, 30)),
                "2020-08-15T00:00:00-03:30",
                "2020-08-15T00:00:00-03:30",
            ),
            (
                DateTime(1, 1, 1),
                "0001-01-01T00:00:00+00:00",
                "0001-01-01T00:00:00Z",
            ),
        ],
    )
    def test_examples(self, d: DateTime, common: str, rfc3339: str):
        assert d.format_common_iso() == common
        assert d.format_rfc3339() == rfc3339
        assert str(d) == rfc3339


class TestParseCommonIso:
    @pytest.mark.parametrize(
        "s, expect",
        [
            (
                "2022-01-01T12:00:00+01:00",
                DateTime(2022, 1, 1, 12, offset=UtcOffset(1)),
            ),
            ("2024-01-01T00:00:00Z", DateTime(2024, 1, 1)),
            ("2024-01-01T00:00:00+00:00", DateTime(2024, 1, 1)),
            ("2024-01-01T00:00:00-00:00", DateTime(2024, 1, 1)),
            (
                "2024-01-01T00:00:00.5Z",
                DateTime(2024, 1, 1, microsecond=500_000),
            ),
            (
                "2024-01-01T00:00:00.123456-09:30",
                DateTime(
                    2024, 1, 1, microsecond=123_456, offset=UtcOffset(-9, 30)
                ),
            ),
            ("2024-02-29T23:59:59Z", DateTime(2024, 2, 29, 23, 59, 59)),
            ("0001-01-01T00:00:00Z", DateTime(1, 1, 1)),
        ],
    )
    def test_valid(self, s: str, expect: DateTime):
        assert DateTime.parse_common_iso(s).exact_eq(expect)

    @pytest.mark.parametrize(
        "s",
        [
            "",
            "T",
            "garbage",
            "2024",
            "2024-01-01",
            "2024-01-01T",
            "2024-01-01T00:00:00",
            "2024-01-01 00:00:00Z",
            "2024-01-01t00:00:00Z",
            "2024-01-01T00:00:00z",
            "2024-1-01T00:00:00Z",
            "2024-01-01T0:00:00Z",
            "2024-01-01T00:00:00.Z",
            "2024-01-01T00:00:00.1234567Z",
            "2024-01-01T00:00:00+0500",
            "2024-01-01T00:00:00+05",
            "2024-01-01T00:00:00+05:00:00",
            "2024-01-01T00:00:00ZZ",
            "2024-01-01T00:00:00Z[UTC]",
            "+2024-01-01T00:00:00Z",
            "2024-01-01T12:𝟘0:00Z",
            " 2024-01-01T00:00:00Z",
        ],
    )
    def test_invalid_format(self, s: str):
        with pytest.raises(InvalidFormatError, match=re.escape(repr(s))):
            DateTime.parse_common_iso(s)

    @pytest.mark.parametrize(
        "s, field",
        [
            ("2023-02-29T00:00:00Z", "day"),
            ("2024-04-31T00:00:00Z", "day"),
            ("2024-01-00T00:00:00Z", "day"),
            ("2024-13-01T00:00:00Z", "month"),
            ("2024-01-01T24:00:00Z", "hour"),
            ("2024-01-01T00:60:00Z", "minute"),
            ("2024-01-01T00:00:60Z", "second"),
            ("2024-01-01T00:00:00+24:00", "offset"),
            ("2024-01-01T00:00:00+05:60", "offset"),
        ],
    )
    def test_invalid_field(self, s: str, field: str):
        with pytest.raises(InvalidFieldError, match=field):
            DateTime.parse_common_iso(s)

    @pytest.mark.parametrize(
        "s",
        [
            "0000-01-01T00:00:00Z",
            "0001-01-01T00:00:00+01:00",
            "9999-12-31T23:00:00-05:00",
        ],
    )
    def test_out_of_range(self, s: str):
        with pytest.raises(OutOfRangeError):
            DateTime.parse_common_iso(s)

    def test_not_a_string(self):
        with pytest.raises(TypeError, match="string"):
            DateTime.parse_common_iso(20240101)  # type: ignore[arg-type]

    @given(text())
    def test_fuzzing(self, s: str):
        try:
            DateTime.parse_common_iso(s)
        except DateTimeError:
            pass

    @given(
        datetimes(
            min_value=py_datetime(2, 1, 1),
            max_value=py_datetime(9998, 12, 31),
        ),
        integers(-1439, 1439),
    )
    def test_round_trip(self, dt: py_datetime, offset_mins: int):
        d = DateTime(
            dt.year,
            dt.month,
            dt.day,
            dt.hour,
            dt.minute,
            dt.second,
            microsecond=dt.microsecond,
            offset=UtcOffset.from_minutes(offset_mins),
        )
        assert DateTime.parse_common_iso(d.format_common_iso()).exact_eq(d)
        assert DateTime.parse_common_iso(d.format_rfc3339()).exact_eq(d)


def test_end_to_end():
    d = DateTime.parse_common_iso("2022-01-01T12:00:00+01:00")
    assert d.iso_week() == 52
    assert d.weekday() is Weekday.SATURDAY
    assert d.ordinal() == 1
    assert d.to_tz("UTC").format_rfc3339() == "2022-01-01T11:00:00Z"
    assert str(d) == "2022-01-01T12:00:00+01:00"


class TestCompilePattern:
    def test_tokens(self):
        assert compile_pattern("[year]-[month] [[x]") == (
            "year",
            "-",
            "month",
            " [x]",
        )
        assert compile_pattern("") == ()
        assert compile_pattern("no placeholders") == ("no placeholders",)

    @pytest.mark.parametrize(
        "pattern, msg",
        [
            ("[year", "Unterminated"),
            ("[year]-[mnth]", r"Unknown placeholder \[mnth\]"),
            ("[]", "Unknown placeholder"),
            ("[YEAR]", "Unknown placeholder"),
        ],
    )
    def test_invalid(self, pattern: str, msg: str):
        with pytest.raises(InvalidFormatError, match=msg):
            compile_pattern(pattern)

    def test_not_a_string(self):
        with pytest.raises(TypeError):
            compile_pattern(None)  # type: ignore[arg-type]


class TestFormatPattern:
    d = DateTime(2024, 3, 5, 8, 30, 7, microsecond=42, offset="CET")

    @pytest.mark.parametrize(
        "pattern, expect",
        [
            (
                "[weekday] [day] [month_name] [year], [hour]:[minute]",
                "Tuesday 05 March 2024, 08:30",
            ),
            (
                "[year]-[month]-[day]T[hour]:[minute]:[second].[subsecond][offset]",
                "2024-03-05T08:30:07.000042+01:00",
            ),
            ("[year]-[ordinal]", "2024-065"),
            ("[year]-W[iso_week]", "2024-W10"),
            ("[[[year]]", "[2024]"),
            ("nothing to replace", "nothing to replace"),
            ("", ""),
        ],
    )
    def test_examples(self, pattern: str, expect: str):
        assert self.d.format(pattern) == expect

    def test_utc_offset(self):
        assert DateTime(2024, 1, 1).format("[offset]") == "+00:00"
        assert (
            DateTime(2024, 1, 1, offset=UtcOffset(0, -30)).format("[offset]")
            == "-00:30"
        )

    def test_invalid_pattern(self):
        with pytest.raises(InvalidFormatError):
            self.d.format("[year]-[nope]")


class TestParseCustomFormat:
    @pytest.mark.parametrize(
        "s, pattern, expect",
        [
            (
                "15/08/2020 23:12",
                "[day]/[month]/[year] [hour]:[minute]",
                DateTime(2020, 8, 15, 23, 12),
            ),
            ("2024-065", "[year]-[ordinal]", DateTime(2024, 3, 5)),
            ("2023-065", "[year]-[ordinal]", DateTime(2023, 3, 6)),
            (
                "Tuesday 05 March 2024",
                "[weekday] [day] [month_name] [year]",
                DateTime(2024, 3, 5),
            ),
            (
                "05 mar 2024",
                "[day] [month_name] [year]",
                DateTime(2024, 3, 5),
            ),
            (
                "2024-01-01 10:00 +05:30",
                "[year]-[month]-[day] [hour]:[minute] [offset]",
                DateTime(2024, 1, 1, 10, offset="IST"),
            ),
            (
                "2024-01-01 10:00 Z",
                "[year]-[month]-[day] [hour]:[minute] [offset]",
                DateTime(2024, 1, 1, 10),
            ),
            (
                "2024-01-01 00:00:00.5",
                "[year]-[month]-[day] [hour]:[minute]:[second].[subsecond]",
                DateTime(2024, 1, 1, microsecond=500_000),
            ),
            (
                "2022-01-01 W52",
                "[year]-[month]-[day] W[iso_week]",
                DateTime(2022, 1, 1),
            ),
            (
                "2024 2024-01-01",
                "[year] [year]-[month]-[day]",
                DateTime(2024, 1, 1),
            ),
            (
                "[2024-01-01]",
                "[[[year]-[month]-[day]]",
                DateTime(2024, 1, 1),
            ),
        ],
    )
    def test_valid(self, s: str, pattern: str, expect: DateTime):
        assert DateTime.parse_custom_format(s, pattern).exact_eq(expect)

    @pytest.mark.parametrize(
        "s, pattern",
        [
            ("2024/01/01", "[year]-[month]-[day]"),
            ("2024-01-01 ", "[year]-[month]-[day]"),
            ("24-01-01", "[year]-[month]-[day]"),
            ("2024-1-01", "[year]-[month]-[day]"),
            ("2024 2025-01-01", "[year] [year]-[month]-[day]"),
            ("", "[year]"),
        ],
    )
    def test_mismatch(self, s: str, pattern: str):
        with pytest.raises(InvalidFormatError, match=re.escape(repr(s))):
            DateTime.parse_custom_format(s, pattern)

    @pytest.mark.parametrize(
        "s, pattern",
        [
            ("2024-01", "[year]-[month]"),
            ("01-01", "[month]-[day]"),
            ("2024-01", "[year]-[day]"),
            ("12:00", "[hour]:[minute]"),
        ],
    )
    def test_incomplete_date(self, s: str, pattern: str):
        with pytest.raises(InvalidFormatError, match="complete date"):
            DateTime.parse_custom_format(s, pattern)

    @pytest.mark.parametrize(
        "s, pattern, field",
        [
            ("2023-02-29", "[year]-[month]-[day]", "day"),
            ("2024-13-01", "[year]-[month]-[day]", "month"),
            ("2024-01-01 25", "[year]-[month]-[day] [hour]", "hour"),
            ("2024-01-01 00:61", "[year]-[month]-[day] [hour]:[minute]", "minute"),
            ("2023-366", "[year]-[ordinal]", "ordinal"),
            (
                "2024-01-01 +24:00",
                "[year]-[month]-[day] [offset]",
                "offset hours",
            ),
            (
                "2024-01-01 -05:60",
                "[year]-[month]-[day] [offset]",
                "offset minutes",
            ),
            ("01 Foo 2024", "[day] [month_name] [year]", "month"),
            (
                "Monday 05 March 2024",
                "[weekday] [day] [month_name] [year]",
                "weekday",
            ),
            ("2022-01-01 W01", "[year]-[month]-[day] W[iso_week]", "iso_week"),
            (
                "2024-03-05 066",
                "[year]-[month]-[day] [ordinal]",
                "ordinal",
            ),
        ],
    )
    def test_invalid_field(self, s: str, pattern: str, field: str):
        with pytest.raises(InvalidFieldError, match=field):
            DateTime.parse_custom_format(s, pattern)

    def test_out_of_range(self):
        with pytest.raises(OutOfRangeError):
            DateTime.parse_custom_format("0000-01-01", "[year]-[month]-[day]")

    @pytest.mark.parametrize("offset", ["+24:00", "+05:60"])
    def test_offset_error_matches_iso(self, offset: str):
        with pytest.raises(InvalidFieldError) as iso_err:
            DateTime.parse_common_iso(f"2024-01-01T00:00:00{offset}")
        with pytest.raises(InvalidFieldError) as custom_err:
            DateTime.parse_custom_format(
                f"2024-01-01 {offset}", "[year]-[month]-[day] [offset]"
            )
        assert custom_err.value.to_dict() == iso_err.value.to_dict()

    def test_invalid_pattern(self):
        with pytest.raises(InvalidFormatError, match="Unknown placeholder"):
            DateTime.parse_custom_format("2024", "[yr]")

    def test_round_trip(self):
        pattern = (
            "[year]-[month]-[day] [hour]:[minute]:[second].[subsecond] [offset]"
        )
        d = DateTime(2020, 8, 15, 23, 12, 9, microsecond=12, offset="WADT")
        assert DateTime.parse_custom_format(d.format(pattern), pattern).exact_eq(
            d
        )

    @given(text())
    def test_fuzzing(self, s: str):
        try:
            DateTime.parse_custom_format(s, "[day] [month_name] [year]")
        except DateTimeError:
            pass
