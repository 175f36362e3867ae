"""Price parsing shared by the transform layer and product models."""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union


def parse_amount(value: Optional[Union[str, float, int, Decimal]]) -> Optional[Decimal]:
    """
    Parse a remote price into a Decimal.

    Returns None for missing, empty, non-numeric or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None
