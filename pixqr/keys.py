"""PIX key kinds and their canonical BR Code forms."""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass

_NON_DIGIT_RE = re.compile(r"\D")


class KeyKind(str, enum.Enum):
    CPF = "CPF"
    CNPJ = "CNPJ"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    RANDOM = "RANDOM"


def only_digits(value: str) -> str:
    return _NON_DIGIT_RE.sub("", value)


def normalize_phone(value: str) -> str:
    """Return the ``+55`` E.164 form of a Brazilian phone key."""

    digits = only_digits(value)
    if not digits:
        return ""
    if len(digits) in (10, 11):
        return f"+55{digits}"
    return f"+{digits}"


@dataclass(frozen=True)
class PaymentKey:
    kind: KeyKind
    value: str

    def normalized(self) -> str:
        """Canonical key string carried in sub-field 01 of template 26."""

        if self.kind in (KeyKind.CPF, KeyKind.CNPJ):
            return only_digits(self.value)
        if self.kind is KeyKind.PHONE:
            return normalize_phone(self.value)
        return self.value.strip().lower()
