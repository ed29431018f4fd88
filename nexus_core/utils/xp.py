"""Experience point awards for completed purchases."""

from decimal import ROUND_FLOOR, Decimal
from typing import Union

from ..constants import XP_PER_CURRENCY_UNIT


def calculate_xp_award(total: Union[Decimal, int, float, str]) -> int:
    """Return ``floor(total * 10)`` XP, or 0 for non-positive totals."""
    amount = Decimal(str(total))
    if amount <= 0:
        return 0
    return int((amount * XP_PER_CURRENCY_UNIT).to_integral_value(rounding=ROUND_FLOOR))
