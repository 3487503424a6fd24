"""
Temperature unit conversion.

Celsius is the storage unit everywhere in the simulator; Fahrenheit only
appears at the presentation boundary. Conversions round to whole degrees
using round-half-away-from-zero (so 0.5 -> 1 and -0.5 -> -1), evaluated on
the decimal representation of the float so values like 68.5 are not nudged
by binary error.

A Celsius -> Fahrenheit -> Celsius round trip is not lossless: each leg
rounds to a whole degree, so the result can differ from the input by up to
one degree.
"""

from decimal import ROUND_HALF_UP, Decimal

from .models import TemperatureUnit

# Desired/scheduled setpoint range per display unit
MIN_TEMP_C = 16
MAX_TEMP_C = 30
MIN_TEMP_F = 60
MAX_TEMP_F = 86


def round_half_away(value: float, digits: int = 0) -> float:
    """Round to `digits` decimals, ties away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def to_fahrenheit(celsius: float) -> int:
    """Convert Celsius to whole-degree Fahrenheit."""
    return int(round_half_away(celsius * 9 / 5 + 32))


def to_celsius(fahrenheit: float) -> int:
    """Convert Fahrenheit to whole-degree Celsius."""
    return int(round_half_away((fahrenheit - 32) * 5 / 9))


def convert(temp: float, to_unit: TemperatureUnit) -> int:
    """Convert a temperature into `to_unit` from the other unit."""
    if to_unit == TemperatureUnit.FAHRENHEIT:
        return to_fahrenheit(temp)
    return to_celsius(temp)


def to_display(temp_c: float, unit: TemperatureUnit) -> float:
    """Present a stored Celsius value in the display unit."""
    if unit == TemperatureUnit.FAHRENHEIT:
        return to_fahrenheit(temp_c)
    return temp_c


def from_display(value: float, unit: TemperatureUnit) -> float:
    """Turn a value entered in the display unit into Celsius."""
    if unit == TemperatureUnit.FAHRENHEIT:
        return to_celsius(value)
    return float(value)


def bounds(unit: TemperatureUnit) -> tuple[int, int]:
    """Allowed setpoint range (inclusive) in the given unit."""
    if unit == TemperatureUnit.FAHRENHEIT:
        return MIN_TEMP_F, MAX_TEMP_F
    return MIN_TEMP_C, MAX_TEMP_C
