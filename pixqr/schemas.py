"""Pydantic schemas for API contracts."""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from .keys import KeyKind
from .normalize import format_amount, normalize_reference, strip_accents
from .validators import (
    validate_amount,
    validate_city,
    validate_key,
    validate_name,
    validate_reference,
)


class KeyIn(BaseModel):
    kind: KeyKind
    value: str = Field(min_length=1, max_length=77)

    @model_validator(mode="after")
    def check_value(self) -> "KeyIn":
        if not validate_key(self.kind, self.value):
            raise ValueError(f"invalid {self.kind.value} key")
        return self


class ReceiverIn(BaseModel):
    name: str = Field(min_length=1)
    city: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        if not validate_name(value):
            raise ValueError("name must have 1 to 25 characters")
        return value

    @field_validator("city")
    @classmethod
    def check_city(cls, value: str) -> str:
        if not validate_city(value):
            raise ValueError("city must have 1 to 15 characters")
        return value


class PayerIn(BaseModel):
    reference: str = Field(default="", description="Up to 20 letters or digits")
    amount: str = Field(description="Positive amount with up to two decimals, e.g. 10.50")

    @field_validator("reference")
    @classmethod
    def check_reference(cls, value: str) -> str:
        if not validate_reference(value):
            raise ValueError("reference must have at most 20 letters or digits")
        return normalize_reference(value)

    @field_validator("amount")
    @classmethod
    def check_amount(cls, value: str) -> str:
        value = value.strip().replace(",", ".")
        if not validate_amount(value):
            raise ValueError("amount must be a positive number with at most two decimals")
        return format_amount(value)


class GeneratePixRequest(BaseModel):
    key: KeyIn
    receiver: ReceiverIn
    description: str | None = Field(default=None, max_length=40)
    payers: list[PayerIn] = Field(min_length=1)

    @field_validator("description")
    @classmethod
    def clean_description(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return strip_accents(value).strip() or None


class ReceiverOut(BaseModel):
    name: str
    city: str


class PayerPayload(BaseModel):
    reference: str
    amount: str
    payload: str
    crc: str


class GeneratePixResponse(BaseModel):
    key_kind: KeyKind
    key: str
    receiver: ReceiverOut
    payers: list[PayerPayload]


class DecodeRequest(BaseModel):
    payload: str = Field(min_length=8)


class DecodeResponse(BaseModel):
    key: str
    name: str
    city: str
    amount: str | None
    reference: str | None
    description: str | None
    crc: str
    fields: dict[str, str]


class ImportPayersRequest(BaseModel):
    csv: str


class ImportedPayer(BaseModel):
    reference: str
    amount: str


class ImportPayersResponse(BaseModel):
    payers: list[ImportedPayer]
