"""Currency and percentage formatting helpers."""

from __future__ import annotations

CURRENCY_SYMBOLS: dict[str, str] = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "AUD": "A$",
    "CAD": "C$",
    "HKD": "HK$",
}
NOT_AVAILABLE = "N/A"
CRORE = 10_000_000
LAKH = 100_000


def _group_indian(digits: str) -> str:
    # 12,34,56,789: last three digits, then pairs.
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs: list[str] = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def group_digits(amount: float, decimals: int = 2, indian: bool = False) -> str:
    fixed = f"{abs(amount):.{decimals}f}"
    # Amounts that round to zero print unsigned.
    sign = "-" if amount < 0 and float(fixed) != 0 else ""
    whole, _, fraction = fixed.partition(".")
    grouped = _group_indian(whole) if indian else f"{int(whole):,}"
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_currency(amount: float | None, currency: str = "INR", decimals: int = 2) -> str:
    if amount is None:
        return NOT_AVAILABLE
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    body = group_digits(amount, decimals, indian=code == "INR")
    if body.startswith("-"):
        return f"-{symbol}{body[1:]}"
    return f"{symbol}{body}"


def format_compact_inr(amount: float | None) -> str:
    """Lakh/crore shorthand, e.g. ``₹1.25 Cr`` or ``₹4.50 L``."""
    if amount is None:
        return NOT_AVAILABLE
    sign = "-" if amount < 0 else ""
    value = abs(amount)
    if value >= CRORE:
        return f"{sign}₹{value / CRORE:.2f} Cr"
    if value >= LAKH:
        return f"{sign}₹{value / LAKH:.2f} L"
    body = group_digits(amount, 0, indian=True)
    if body.startswith("-"):
        return f"-₹{body[1:]}"
    return f"₹{body}"


def format_percentage(decimal: float | None, decimals: int = 2) -> str:
    if decimal is None:
        return NOT_AVAILABLE
    # Adding 0.0 turns a rounded -0.0 into 0.0.
    percentage = round(decimal * 100.0, decimals) + 0.0
    sign = "+" if percentage >= 0 else ""
    return f"{sign}{percentage:.{decimals}f}%"


def format_xirr(rate: float | None) -> str:
    return format_percentage(rate)
