"""Amount parsing utilities."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import re

from lendtrack.domain.entities import MAX_AMOUNT
from lendtrack.domain.errors import ValidationError, amount_too_large, non_positive_amount

CENTS = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a loan amount string into a positive Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45", "₾50", "€10"
    - "1,234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents, greater than zero and at most
        MAX_AMOUNT

    Raises:
        ValidationError: If the string cannot be parsed or is out of range
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥₾₽¤]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    # Remove whitespace again
    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse amount '{amount_str}'") from e

    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    if amount > MAX_AMOUNT:
        raise ValidationError(amount_too_large(amount, MAX_AMOUNT))
    if amount <= 0:
        raise ValidationError(non_positive_amount(amount))

    rounded = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if rounded == 0:
        raise ValidationError(non_positive_amount(amount))
    return rounded
