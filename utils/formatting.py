"""
Number formatting helpers.

Derived figures are handed to the presentation layer as fixed-decimal strings.
``to_fixed`` rounds half away from zero on the exact binary value of the float,
which gives the same strings as JavaScript's ``Number.prototype.toFixed`` (Python's
own ``format`` rounds exact ties to even instead).
"""
from decimal import Decimal, ROUND_HALF_UP


def to_fixed(value, digits=2):
    """Format *value* with exactly *digits* decimals (``None`` counts as 0)."""
    number = Decimal(float(value or 0))
    quantum = Decimal(1).scaleb(-digits)
    return str(number.quantize(quantum, rounding=ROUND_HALF_UP))


def to_number(value, fallback=0.0):
    """Parse *value* as float, returning *fallback* for None/blank/garbage."""
    if value is None or value == '':
        return fallback
    try:
        return float(value)
    except (TypeError, ValueError):
        return fallback
