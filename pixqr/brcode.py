"""PIX BR Code payload encoder and decoder."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .crc import crc16_ccitt_false
from .errors import MissingFieldError, err_bad_payload, err_checksum_mismatch
from .keys import PaymentKey
from .normalize import format_amount, normalize_text, truncate_bytes
from .tlv import TLVItem, build_tlv, encode_field, parse_tlv

PIX_GUI = "BR.GOV.BCB.PIX"
MERCHANT_CATEGORY_CODE = "0000"
CURRENCY_BRL = "986"
COUNTRY_CODE = "BR"
REFERENCE_PLACEHOLDER = "***"
CRC_PREFIX = "6304"

MAX_NAME_BYTES = 25
MAX_CITY_BYTES = 15
MAX_REFERENCE_BYTES = 25


@dataclass(frozen=True)
class Receiver:
    name: str
    city: str


@dataclass(frozen=True)
class Payer:
    reference: str
    amount: str


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    crc: str


@dataclass(frozen=True)
class DecodedPayload:
    fields: dict[str, str]
    key: str
    name: str
    city: str
    crc: str
    amount: str | None = None
    reference: str | None = None
    description: str | None = None
    account_info: dict[str, str] = field(default_factory=dict)


def normalize_receiver(receiver: Receiver) -> Receiver:
    """ASCII-normalize and truncate the merchant name and city."""

    return Receiver(
        name=truncate_bytes(normalize_text(receiver.name), MAX_NAME_BYTES),
        city=truncate_bytes(normalize_text(receiver.city), MAX_CITY_BYTES),
    )


def _merchant_account_items(key: str, description: str | None) -> Iterable[TLVItem]:
    yield TLVItem(tag="00", value=PIX_GUI)
    yield TLVItem(tag="01", value=key)
    if description:
        yield TLVItem(tag="02", value=description)


def encode_payload(
    key: PaymentKey,
    receiver: Receiver,
    amount: str | None = None,
    reference: str | None = None,
    description: str | None = None,
) -> EncodedPayload:
    """Assemble the BR Code fields in their mandated order and append the CRC."""

    key_value = key.normalized()
    if not key_value:
        raise MissingFieldError("key")
    receiver = normalize_receiver(receiver)
    if not receiver.name:
        raise MissingFieldError("name")
    if not receiver.city:
        raise MissingFieldError("city")

    amount_value = format_amount(amount)
    reference_value = truncate_bytes(reference or "", MAX_REFERENCE_BYTES) or REFERENCE_PLACEHOLDER

    parts = [
        encode_field("00", "01"),
        encode_field("26", build_tlv(_merchant_account_items(key_value, description))),
        encode_field("52", MERCHANT_CATEGORY_CODE),
        encode_field("53", CURRENCY_BRL),
    ]
    if amount_value is not None:
        parts.append(encode_field("54", amount_value))
    parts.extend(
        [
            encode_field("58", COUNTRY_CODE),
            encode_field("59", receiver.name),
            encode_field("60", receiver.city),
            encode_field("62", encode_field("05", reference_value)),
        ]
    )

    crc_input = "".join(parts) + CRC_PREFIX
    crc = crc16_ccitt_false(crc_input)
    return EncodedPayload(payload=f"{crc_input}{crc}", crc=crc)


def build_payload(
    key: PaymentKey,
    receiver: Receiver,
    amount: str | None = None,
    reference: str | None = None,
    description: str | None = None,
) -> str:
    """Return the complete BR Code string for one payer."""

    return encode_payload(key, receiver, amount, reference, description).payload


def _sub_fields(value: str) -> dict[str, str]:
    return {item.tag: item.value for item in parse_tlv(value)}


def decode_payload(payload: str) -> DecodedPayload:
    """Parse a BR Code string and verify its CRC trailer."""

    payload = payload.strip()
    if len(payload) < 8 or payload[-8:-4] != CRC_PREFIX:
        raise err_bad_payload("Payload does not end with a CRC field")
    crc = payload[-4:]
    expected = crc16_ccitt_false(payload[:-4])
    if crc.upper() != expected:
        raise err_checksum_mismatch(f"Payload CRC is {crc}, expected {expected}")

    try:
        fields = {item.tag: item.value for item in parse_tlv(payload)}
        account_info = _sub_fields(fields.get("26", ""))
        additional = _sub_fields(fields.get("62", ""))
    except ValueError as exc:
        raise err_bad_payload(str(exc)) from exc

    if fields.get("00") != "01":
        raise err_bad_payload("Payload format indicator must be 01")
    if account_info.get("00", "").upper() != PIX_GUI or "01" not in account_info:
        raise err_bad_payload("Payload carries no PIX merchant account information")

    return DecodedPayload(
        fields=fields,
        key=account_info["01"],
        name=fields.get("59", ""),
        city=fields.get("60", ""),
        crc=crc,
        amount=fields.get("54"),
        reference=additional.get("05"),
        description=account_info.get("02"),
        account_info=account_info,
    )
