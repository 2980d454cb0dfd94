"""Locale-invariant decimal formatting for analysis artifacts.

Downstream consumers of the artifacts expect the shortest round-trip form of
each value with ``.`` as decimal separator and no thousands separators.
Integral values carry no fractional part. Magnitudes below ``1e-4`` or from
``1e15`` up are written in exponent form, as ``1E-05`` / ``1E+15``.
"""

from __future__ import annotations

import math

# Smallest magnitude written in exponent form; repr() only switches at 1e16.
EXPONENT_THRESHOLD = 1e15


def _exponent_form(mantissa: str, exponent: int) -> str:
    if mantissa.endswith(".0"):
        mantissa = mantissa[:-2]
    sign = "-" if exponent < 0 else "+"
    return f"{mantissa}E{sign}{abs(exponent):02d}"


def format_decimal(value: float) -> str:
    """Format a number the way the artifact readers parse it.

    >>> format_decimal(100.0)
    '100'
    >>> format_decimal(0.25)
    '0.25'
    >>> format_decimal(1e-05)
    '1E-05'
    >>> format_decimal(1234567890123456.0)
    '1.234567890123456E+15'
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        return _exponent_form(mantissa, int(exponent))

    sign, digits = ("-", text[1:]) if text.startswith("-") else ("", text)
    integral, _, fraction = digits.partition(".")
    if abs(value) >= EXPONENT_THRESHOLD:
        significant = (integral + fraction).rstrip("0")
        mantissa = significant[0]
        if len(significant) > 1:
            mantissa += "." + significant[1:]
        return _exponent_form(sign + mantissa, len(integral) - 1)

    if fraction == "0":
        digits = integral
    if digits == "0":
        return "0"
    return sign + digits
