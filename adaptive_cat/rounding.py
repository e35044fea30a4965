"""
Rounding helpers.

Every rounded value produced by the core is persisted and compared for exact
equality, so all of them go through ``round_half_up`` instead of the built-in
``round`` (which rounds half to even on the binary value).
"""

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round ``value`` to ``places`` decimals, halves away from zero.

    The float is first converted through its shortest decimal representation,
    so ``round_half_up(2.675, 2)`` is 2.68 even though the binary value is
    slightly below 2.675.

    Args:
        value: Number to round.
        places: Number of decimal places to keep (0 for an integral result).

    Returns:
        The rounded value as a float.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
