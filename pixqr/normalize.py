"""Text, reference and amount normalization for BR Code fields."""
from __future__ import annotations

import re
import unicodedata
from decimal import Decimal, InvalidOperation

from .errors import InvalidFieldError

_WHITESPACE_RE = re.compile(r"\s+")
_NON_PRINTABLE_ASCII_RE = re.compile(r"[^\x20-\x7E]")
_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")

CENTS = Decimal("0.01")

# Latin letters that NFKD does not decompose
_TRANSLITERATIONS = str.maketrans(
    {
        "ß": "ss",
        "Æ": "AE",
        "æ": "ae",
        "Ø": "O",
        "ø": "o",
        "Œ": "OE",
        "œ": "oe",
        "Đ": "D",
        "đ": "d",
        "Ł": "L",
        "ł": "l",
        "Þ": "TH",
        "þ": "th",
    }
)


def strip_accents(text: str) -> str:
    """Drop combining marks after NFKD decomposition (``"São"`` -> ``"Sao"``, ``"ß"`` -> ``"ss"``)."""

    decomposed = unicodedata.normalize("NFKD", text.translate(_TRANSLITERATIONS))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: str) -> str:
    """Return the uppercase printable-ASCII form used for merchant name and city."""

    ascii_text = _NON_PRINTABLE_ASCII_RE.sub("", _WHITESPACE_RE.sub(" ", strip_accents(text)))
    return _WHITESPACE_RE.sub(" ", ascii_text).strip().upper()


def truncate_bytes(text: str, limit: int) -> str:
    encoded = text.encode("utf-8")
    if len(encoded) <= limit:
        return text
    # errors="ignore" drops a trailing partial character
    return encoded[:limit].decode("utf-8", errors="ignore")


def normalize_reference(text: str) -> str:
    """Keep only ASCII letters and digits of a payer reference."""

    return _NON_ALNUM_RE.sub("", strip_accents(text))


def format_amount(amount: str | Decimal | None) -> str | None:
    """Format an amount with two fraction digits, or ``None`` when absent or zero."""

    if amount is None:
        return None
    if isinstance(amount, str):
        amount = amount.strip()
        if not amount:
            return None
    try:
        value = Decimal(amount)
        if not value.is_finite() or value < 0:
            raise InvalidFieldError("amount", f"Amount {amount!r} must be a non-negative number")
        value = value.quantize(CENTS)
    except (InvalidOperation, ValueError) as exc:
        raise InvalidFieldError("amount", f"Amount {amount!r} is not a decimal number") from exc
    if value == 0:
        return None
    return f"{value:.2f}"
