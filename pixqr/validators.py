"""Form-level validation rules applied before the encoder is called."""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from .keys import KeyKind, only_digits
from .normalize import normalize_reference, normalize_text

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")

MAX_EMAIL_LENGTH = 77
MAX_NAME_LENGTH = 25
MAX_CITY_LENGTH = 15
MAX_REFERENCE_LENGTH = 20
MAX_AMOUNT = Decimal("999999999.99")


def _check_digit(digits: str, weights: list[int]) -> int:
    remainder = sum(int(d) * w for d, w in zip(digits, weights)) % 11
    return 0 if remainder < 2 else 11 - remainder


def validate_cpf(value: str) -> bool:
    digits = only_digits(value)
    if len(digits) != 11 or len(set(digits)) == 1:
        return False
    first = _check_digit(digits[:9], list(range(10, 1, -1)))
    second = _check_digit(digits[:10], list(range(11, 1, -1)))
    return digits[9:] == f"{first}{second}"


def validate_cnpj(value: str) -> bool:
    digits = only_digits(value)
    if len(digits) != 14 or len(set(digits)) == 1:
        return False
    first = _check_digit(digits[:12], [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2])
    second = _check_digit(digits[:13], [6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2])
    return digits[12:] == f"{first}{second}"


def validate_email(value: str) -> bool:
    value = value.strip()
    return len(value) <= MAX_EMAIL_LENGTH and bool(EMAIL_RE.match(value))


def validate_phone(value: str) -> bool:
    return 10 <= len(only_digits(value)) <= 13


def validate_random(value: str) -> bool:
    return bool(UUID_RE.match(value.strip().lower()))


_KEY_VALIDATORS = {
    KeyKind.CPF: validate_cpf,
    KeyKind.CNPJ: validate_cnpj,
    KeyKind.EMAIL: validate_email,
    KeyKind.PHONE: validate_phone,
    KeyKind.RANDOM: validate_random,
}


def validate_key(kind: KeyKind, value: str) -> bool:
    return _KEY_VALIDATORS[KeyKind(kind)](value)


def validate_name(text: str) -> bool:
    normalized = normalize_text(text)
    return 0 < len(normalized) <= MAX_NAME_LENGTH


def validate_city(text: str) -> bool:
    normalized = normalize_text(text)
    return 0 < len(normalized) <= MAX_CITY_LENGTH


def validate_reference(text: str) -> bool:
    """Empty references are accepted, the encoder substitutes ``***``."""

    return len(normalize_reference(text)) <= MAX_REFERENCE_LENGTH


def validate_amount(text: str) -> bool:
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        return False
    if not value.is_finite() or value <= 0 or value > MAX_AMOUNT:
        return False
    return value.as_tuple().exponent >= -2
