"""Shared error definitions for the encoder and the HTTP layer."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


class MissingFieldError(ServiceError):
    """A required payload field is empty after normalization."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(
            code="ERR_MISSING_FIELD",
            message=message or f"Field '{field}' is empty after normalization",
            status_code=422,
        )
        self.field = field


class FieldTooLongError(ServiceError):
    """An encoded TLV value does not fit a two-digit length."""

    def __init__(self, tag: str, length: int) -> None:
        super().__init__(
            code="ERR_FIELD_TOO_LONG",
            message=f"Field {tag} is {length} bytes long, maximum is 99",
            status_code=422,
        )
        self.tag = tag
        self.length = length


class InvalidFieldError(ServiceError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(code="ERR_INVALID_FIELD", message=message, status_code=422)
        self.field = field


def err_bad_payload(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_BAD_PAYLOAD", message=message or "Invalid BR Code payload", status_code=400)


def err_checksum_mismatch(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_CRC_MISMATCH", message=message or "Payload CRC does not match its content", status_code=400)


def err_no_payers(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_NO_PAYERS", message=message or "At least one payer is required", status_code=400)


def err_batch_too_large(limit: int) -> ServiceError:
    return ServiceError(code="ERR_BATCH_TOO_LARGE", message=f"A batch accepts at most {limit} payers", status_code=413)
