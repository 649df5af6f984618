"""Shared pytest fixtures for pixqr tests."""

from __future__ import annotations

import binascii

import pytest
from fastapi.testclient import TestClient

from pixqr.api import app
from pixqr.brcode import Receiver
from pixqr.config import settings
from pixqr.keys import KeyKind, PaymentKey


def reference_crc(data: str) -> str:
    """Independent CRC16/CCITT-FALSE via the standard library."""
    return f"{binascii.crc_hqx(data.encode('utf-8'), 0xFFFF):04X}"


@pytest.fixture
def email_key() -> PaymentKey:
    return PaymentKey(kind=KeyKind.EMAIL, value="fulano@example.com")


@pytest.fixture
def receiver() -> Receiver:
    return Receiver(name="FULANO DE TAL", city="SAO PAULO")


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-API-Key": settings.api_key}
