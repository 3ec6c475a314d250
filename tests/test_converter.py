"""
Tests for the unit converter.
"""
import pytest

from veer.exceptions import ValidationError
from veer.tools.converter import DEFAULT_UNITS, UNITS_BY_CATEGORY, convert, format_result


class TestConvert:
    """Tests for converting between units."""

    @pytest.mark.parametrize("value,category,source,target,expected", [
        (1, "length", "m", "ft", "3.28084"),
        (1, "length", "mi", "km", "1.609344"),
        (100, "temperature", "c", "f", "212"),
        (0, "temperature", "c", "k", "273.15"),
        (-40, "temperature", "c", "f", "-40"),
        (32, "temperature", "f", "c", "0"),
        (1, "data", "gb", "mb", "1,024"),
        (2, "time", "h", "min", "120"),
        (1, "weight", "kg", "g", "1,000"),
    ])
    def test_conversions(self, value, category, source, target, expected):
        assert format_result(convert(value, category, source, target)) == expected

    def test_same_unit(self):
        assert convert(42.5, "length", "cm", "cm") == pytest.approx(42.5)

    def test_currency_goes_through_usd(self):
        # 92 EUR -> 100 USD -> 79 GBP
        assert convert(92, "currency", "eur", "gbp") == pytest.approx(79)

    def test_unit_ids_are_case_insensitive(self):
        assert convert(1, "currency", "USD", "INR") == pytest.approx(83.12)

    def test_unknown_unit(self):
        with pytest.raises(ValidationError) as exc_info:
            convert(1, "length", "m", "parsec")
        assert exc_info.value.message.startswith("Unknown length unit: parsec")

    def test_unknown_category(self):
        with pytest.raises(ValidationError):
            convert(1, "volume", "l", "ml")

    def test_defaults_exist(self):
        for category, (source, target) in DEFAULT_UNITS.items():
            ids = {unit.id for unit in UNITS_BY_CATEGORY[category]}
            assert source in ids and target in ids


class TestFormatResult:
    @pytest.mark.parametrize("value,expected", [
        (0, "0"),
        (1000000, "1,000,000"),
        (12345678, "1.2346e+7"),
        (0.00001234, "1.2340e-5"),
        (-25000000, "-2.5000e+7"),
        (0.5, "0.5"),
        (1234.5678912, "1,234.567891"),
    ])
    def test_format(self, value, expected):
        assert format_result(value) == expected
