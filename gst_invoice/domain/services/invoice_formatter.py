# gst_invoice/domain/services/invoice_formatter.py
"""Amount-in-words (Indian numbering) and rupee formatting for invoices."""

from __future__ import annotations

ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# (divisor, word), largest first
_SCALES = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
]


def _hundreds_to_words(num: int) -> str:
    parts: list[str] = []
    if num >= 100:
        parts.append(f"{ONES[num // 100]} Hundred")
        num %= 100
    if num >= 20:
        parts.append(TENS[num // 10])
        if num % 10:
            parts.append(ONES[num % 10])
    elif num > 0:
        parts.append(ONES[num])
    return " ".join(parts)


def amount_in_words(amount: float) -> str:
    """
    ``1030`` -> ``"One Thousand Thirty Rupees Only"``.

    Paise are rounded to two places.
    """
    if amount == 0:
        return "Zero Rupees Only"

    rupees = int(amount)
    paise = int(round((amount - rupees) * 100))
    if paise == 100:
        rupees, paise = rupees + 1, 0

    words: list[str] = []
    for divisor, scale in _SCALES:
        if rupees >= divisor:
            words.append(f"{_hundreds_to_words(rupees // divisor)} {scale}")
            rupees %= divisor
    if rupees > 0:
        words.append(_hundreds_to_words(rupees))

    text = " ".join(words).strip()
    text = f"{text} Rupees" if text else "Zero Rupees"
    if paise > 0:
        text += f" and {_hundreds_to_words(paise)} Paise"
    return f"{text} Only"


def format_currency(amount: float) -> str:
    """``1234.5`` -> ``"₹1,234.50"``."""
    return f"₹{amount:,.2f}"
