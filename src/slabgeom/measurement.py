"""
Inch measurement parsing and formatting.

Accepts decimals ("12.5"), mixed numbers ("12 1/2", "12-1/2") and bare
fractions ("3/8"); formats values to the nearest sixteenth.
"""

import math

SIXTEENTHS = 16


def parse_inches(raw):
    """Parse a length in inches, or return None when the text is not a length."""
    if raw is None:
        return None
    trimmed = str(raw).strip()
    if not trimmed:
        return None

    try:
        return float(trimmed)
    except ValueError:
        pass

    sign = 1.0
    if trimmed.startswith("-"):
        sign = -1.0
        trimmed = trimmed[1:]

    parts = trimmed.replace("-", " ").split()
    value = None
    if len(parts) == 2:
        whole = _to_float(parts[0])
        fraction = _fraction_value(parts[1])
        if whole is not None and fraction is not None:
            value = whole + fraction
    elif len(parts) == 1:
        value = _fraction_value(parts[0])

    if value is None:
        return None
    return sign * value


def _to_float(text):
    try:
        return float(text)
    except ValueError:
        return None


def _fraction_value(raw):
    parts = raw.split("/")
    if len(parts) != 2:
        return None
    numerator = _to_float(parts[0])
    denominator = _to_float(parts[1])
    if numerator is None or not denominator:
        return None
    return numerator / denominator


def fractional_components(value, denominator=SIXTEENTHS):
    """
    Split a value into (whole, numerator, denominator, is_negative).

    The fraction is rounded half up to the given denominator and reduced; a
    numerator that rounds up to a full unit carries into the whole part.
    """
    is_negative = value < 0
    abs_value = abs(value)
    whole = int(math.floor(abs_value))
    numerator = int(math.floor((abs_value - whole) * denominator + 0.5))

    if numerator == denominator:
        whole += 1
        numerator = 0

    numerator, denominator = reduced_fraction(numerator, denominator)
    return whole, numerator, denominator, is_negative


def reduced_fraction(numerator, denominator):
    """Reduce a fraction by its greatest common divisor."""
    if numerator == 0:
        return 0, denominator
    divisor = math.gcd(abs(numerator), denominator)
    return numerator // divisor, denominator // divisor


def format_fractional(whole, numerator, denominator, is_negative=False):
    sign = "-" if is_negative else ""
    if numerator == 0:
        return f"{sign}{whole}"
    if whole == 0:
        return f"{sign}{numerator}/{denominator}"
    return f"{sign}{whole} {numerator}/{denominator}"


def format_inches(value):
    """Format inches as a mixed number in sixteenths, e.g. "12 3/8"."""
    return format_fractional(*fractional_components(value, SIXTEENTHS))
