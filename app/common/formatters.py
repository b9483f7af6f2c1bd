"""Number parsing, rounding and formatting helpers for footprint results.

Rounding follows fixed-point "half away from zero" on the exact binary value
of the float, so 2.675 rounds to 2.67 and 0.125 rounds to 0.13. Magnitudes
of 1e21 and above are left unrounded and render in exponent form.
"""
from __future__ import annotations

import math
import re
from decimal import Decimal, ROUND_HALF_UP


_LEADING_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT_RE = re.compile(r"[+-]?\d+")

# Past this magnitude a float has no fractional digits left to round.
FIXED_POINT_LIMIT = 1e21


def _quantize(value: float, places: int) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)


def round_to(value: float, places: int = 2) -> float:
    """Round a float to a fixed number of decimal places."""
    if not math.isfinite(value) or abs(value) >= FIXED_POINT_LIMIT:
        return value
    return float(_quantize(value, places))


def fixed(value: float, places: int = 2) -> str:
    """Render a float with exactly ``places`` decimals."""
    if not math.isfinite(value):
        return str(value)
    if abs(value) >= FIXED_POINT_LIMIT:
        return repr(value)
    return str(_quantize(value, places))


def format_number(value: float) -> str:
    """Shortest plain rendering of a float: 5.0 -> '5', 12.5 -> '12.5'."""
    if math.isfinite(value) and abs(value) < FIXED_POINT_LIMIT and value == int(value):
        return str(int(value))
    return repr(value)


def parse_leading_float(value) -> float | None:
    """Read the leading numeric prefix of a value, like a lenient form parser.

    ``"12.5kWh"`` gives 12.5, ``"2.5e3"`` gives 2500.0, ``"1.2.3"`` gives 1.2
    and ``"abc"`` gives None.
    Numbers pass through unchanged; None, booleans and non-finite numbers
    give None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
        return result if math.isfinite(result) else None
    match = _LEADING_FLOAT_RE.match(str(value).strip())
    if not match:
        return None
    result = float(match.group(0))
    return result if math.isfinite(result) else None


def parse_leading_int(value) -> int | None:
    """Read the leading integer of a value (``"3 people"`` gives 3)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, int):
        return value
    match = _LEADING_INT_RE.match(str(value).strip())
    if not match:
        return None
    return int(match.group(0))
