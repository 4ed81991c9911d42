# planning_engine/utils/rounding.py
from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero (4.5 -> 5, -4.5 -> -5).

    The built-in ``round`` sends ties to the even neighbour, which would turn
    a 4.5 head count into 4.
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
