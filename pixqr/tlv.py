"""Utility helpers to build and parse EMV-style TLV payloads.

Lengths are counted in UTF-8 bytes, never in code points.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .errors import FieldTooLongError

MAX_FIELD_LENGTH = 99


def encode_field(tag: str, value: str) -> str:
    """Encode ``value`` as ``tag + 2-digit byte length + value``."""

    if len(tag) != 2 or not tag.isascii() or not tag.isdigit():
        raise ValueError(f"TLV tag must be two digits, got {tag!r}")
    length = len(value.encode("utf-8"))
    if length > MAX_FIELD_LENGTH:
        raise FieldTooLongError(tag, length)
    return f"{tag}{length:02d}{value}"


@dataclass(frozen=True)
class TLVItem:
    tag: str
    value: str

    def serialize(self) -> str:
        return encode_field(self.tag, self.value)


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Serialize iterable of TLV items into EMV string."""

    return "".join(item.serialize() for item in items)


def parse_tlv(payload: str) -> Iterator[TLVItem]:
    """Parse TLV payload string into TLV items."""

    raw = payload.encode("utf-8")
    idx = 0
    total = len(raw)
    while idx + 4 <= total:
        tag = raw[idx : idx + 2].decode("ascii", errors="replace")
        length_text = raw[idx + 2 : idx + 4].decode("ascii", errors="replace")
        if not length_text.isdigit():
            raise ValueError(f"Invalid TLV length {length_text!r} for tag {tag}")
        value_start = idx + 4
        value_end = value_start + int(length_text)
        if value_end > total:
            raise ValueError("Invalid TLV length exceeds payload")
        try:
            value = raw[value_start:value_end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError(f"TLV value for tag {tag} splits a character") from exc
        yield TLVItem(tag=tag, value=value)
        idx = value_end
    if idx != total:
        raise ValueError("Dangling TLV data detected")
