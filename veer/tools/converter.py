"""
Unit converter for length, weight, temperature, currency, time and data sizes.

Every unit converts through its category's base unit (metre, kilogram,
Celsius, US dollar, second, byte).
"""
from dataclasses import dataclass
from typing import Callable, Dict, List

from veer.exceptions import ValidationError


@dataclass(frozen=True)
class Unit:
    id: str
    name: str
    symbol: str
    to_base: Callable[[float], float]
    from_base: Callable[[float], float]


def _scaled(unit_id: str, name: str, factor: float, symbol: str = "") -> Unit:
    return Unit(unit_id, name, symbol or unit_id, lambda v: v * factor, lambda v: v / factor)


LENGTH_UNITS = [
    _scaled("mm", "Millimeter", 0.001),
    _scaled("cm", "Centimeter", 0.01),
    _scaled("m", "Meter", 1),
    _scaled("km", "Kilometer", 1000),
    _scaled("in", "Inch", 0.0254),
    _scaled("ft", "Foot", 0.3048),
    _scaled("yd", "Yard", 0.9144),
    _scaled("mi", "Mile", 1609.344),
]

WEIGHT_UNITS = [
    _scaled("mg", "Milligram", 1e-6),
    _scaled("g", "Gram", 0.001),
    _scaled("kg", "Kilogram", 1),
    _scaled("t", "Metric Ton", 1000),
    _scaled("oz", "Ounce", 0.0283495),
    _scaled("lb", "Pound", 0.453592),
    _scaled("st", "Stone", 6.35029),
]

TEMPERATURE_UNITS = [
    Unit("c", "Celsius", "°C", lambda v: v, lambda v: v),
    Unit("f", "Fahrenheit", "°F", lambda v: (v - 32) * 5 / 9, lambda v: v * 9 / 5 + 32),
    Unit("k", "Kelvin", "K", lambda v: v - 273.15, lambda v: v + 273.15),
]

TIME_UNITS = [
    _scaled("ms", "Millisecond", 0.001),
    _scaled("s", "Second", 1),
    _scaled("min", "Minute", 60),
    _scaled("h", "Hour", 3600),
    _scaled("d", "Day", 86400),
    _scaled("w", "Week", 604800),
    _scaled("mo", "Month", 2629746),
    _scaled("y", "Year", 31556952),
]

DATA_UNITS = [
    _scaled("b", "Byte", 1, "B"),
    _scaled("kb", "Kilobyte", 1024, "KB"),
    _scaled("mb", "Megabyte", 1024 ** 2, "MB"),
    _scaled("gb", "Gigabyte", 1024 ** 3, "GB"),
    _scaled("tb", "Terabyte", 1024 ** 4, "TB"),
]

# Fixed rates against USD; there is no live rate feed.
CURRENCY_RATES: Dict[str, float] = {
    "USD": 1,
    "EUR": 0.92,
    "GBP": 0.79,
    "INR": 83.12,
    "JPY": 149.50,
    "CAD": 1.36,
    "AUD": 1.53,
    "CHF": 0.88,
    "CNY": 7.24,
    "KRW": 1320.50,
}

CURRENCY_UNITS = [
    Unit(code.lower(), code, code, lambda v, rate=rate: v / rate, lambda v, rate=rate: v * rate)
    for code, rate in CURRENCY_RATES.items()
]

UNITS_BY_CATEGORY: Dict[str, List[Unit]] = {
    "length": LENGTH_UNITS,
    "weight": WEIGHT_UNITS,
    "temperature": TEMPERATURE_UNITS,
    "currency": CURRENCY_UNITS,
    "time": TIME_UNITS,
    "data": DATA_UNITS,
}

DEFAULT_UNITS = {
    "length": ("m", "ft"),
    "weight": ("kg", "lb"),
    "temperature": ("c", "f"),
    "currency": ("usd", "eur"),
    "time": ("h", "min"),
    "data": ("mb", "gb"),
}


def find_unit(category: str, unit_id: str) -> Unit:
    units = UNITS_BY_CATEGORY.get(category)
    if units is None:
        raise ValidationError(
            f"Unknown category: {category}. Valid categories: {', '.join(UNITS_BY_CATEGORY)}",
            field="category",
            value=category,
        )
    for unit in units:
        if unit.id == unit_id.lower():
            return unit
    raise ValidationError(
        f"Unknown {category} unit: {unit_id}. Valid units: {', '.join(u.id for u in units)}",
        field="unit",
        value=unit_id,
    )


def convert(value: float, category: str, from_unit: str, to_unit: str) -> float:
    """Convert ``value`` between two units of the same category."""
    source = find_unit(category, from_unit)
    target = find_unit(category, to_unit)
    return target.from_base(source.to_base(value))


def format_result(result: float) -> str:
    """
    Display form of a conversion result.

    Very small or very large magnitudes use 4-digit exponent notation
    (``1.2346e+7``); everything else uses grouping and up to 6 decimals.
    """
    if result != 0 and (abs(result) < 0.0001 or abs(result) > 1000000):
        mantissa, exponent = f"{result:.4e}".split("e")
        return f"{mantissa}e{'-' if exponent.startswith('-') else '+'}{int(exponent[1:])}"
    if result == 0:
        return "0"
    text = f"{result:,.6f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
