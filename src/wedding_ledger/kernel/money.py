"""
Rupee formatting for alert messages

Amounts travel through the ledger as integer paise. Only alert messages
turn them into text; every other surface returns the raw integers.
"""

from decimal import Decimal

PAISE_PER_RUPEE = 100


def group_indian(digits: str) -> str:
    """
    Group an integer digit string the Indian way: last three, then pairs

    >>> group_indian("4200000")
    '42,00,000'
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_full_inr(amount_paise: int) -> str:
    """
    Full rupee amount with Indian grouping, e.g. 12345650 -> "₹1,23,456.5"

    Trailing zero decimals are dropped.
    """
    sign = "-" if amount_paise < 0 else ""
    rupees = Decimal(abs(amount_paise)) / PAISE_PER_RUPEE
    whole, _, fraction = f"{rupees:.2f}".partition(".")
    fraction = fraction.rstrip("0")
    text = group_indian(whole)
    if fraction:
        text = f"{text}.{fraction}"
    return f"{sign}₹{text}"


def format_inr(amount_paise: int) -> str:
    """
    Compact rupee amount: crores (Cr), lakhs (L), thousands (K)

    >>> format_inr(4200000 * 100)
    '₹42.00L'
    """
    rupees = Decimal(amount_paise) / PAISE_PER_RUPEE
    if rupees >= 10_000_000:
        return f"₹{rupees / 10_000_000:.2f}Cr"
    if rupees >= 100_000:
        return f"₹{rupees / 100_000:.2f}L"
    if rupees >= 1_000:
        return f"₹{rupees / 1_000:.1f}K"
    return format_full_inr(amount_paise)


def rupees_to_paise(rupees: str | int | Decimal) -> int:
    """
    Parse a rupee amount typed by a person ("1,50,000" or "1500.50") into paise

    Raises:
        ValueError: Not a number, or more than two decimal places
    """
    text = str(rupees).replace(",", "").replace("₹", "").strip()
    try:
        value = Decimal(text)
    except ArithmeticError as e:
        raise ValueError(f"Not a rupee amount: {rupees!r}") from e
    if not value.is_finite():
        raise ValueError(f"Not a rupee amount: {rupees!r}")

    paise = value * PAISE_PER_RUPEE
    if paise != paise.to_integral_value():
        raise ValueError(f"Rupee amounts have at most two decimal places: {rupees!r}")
    return int(paise)
