"""Batch payload generation for one receiver and many payers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..brcode import Payer, Receiver, encode_payload
from ..config import settings
from ..errors import err_batch_too_large, err_no_payers
from ..keys import PaymentKey
from ..monitoring import record_payloads_generated

logger = logging.getLogger("pixqr.generator")


@dataclass(slots=True)
class PayerResult:
    reference: str
    amount: str
    payload: str
    crc: str


@dataclass(slots=True)
class BatchResult:
    key: PaymentKey
    receiver: Receiver
    results: list[PayerResult]


class PixBatchGenerator:
    def __init__(self, max_payers: int | None = None):
        self.max_payers = max_payers or settings.max_payers

    def generate(
        self,
        *,
        key: PaymentKey,
        receiver: Receiver,
        payers: Sequence[Payer],
        description: str | None = None,
    ) -> BatchResult:
        if not payers:
            raise err_no_payers()
        if len(payers) > self.max_payers:
            raise err_batch_too_large(self.max_payers)

        results = []
        for payer in payers:
            encoded = encode_payload(
                key,
                receiver,
                amount=payer.amount,
                reference=payer.reference,
                description=description,
            )
            results.append(
                PayerResult(
                    reference=payer.reference,
                    amount=payer.amount,
                    payload=encoded.payload,
                    crc=encoded.crc,
                )
            )

        record_payloads_generated(key.kind.value, len(results))
        logger.info(
            "pix batch generated",
            extra={"key_kind": key.kind.value, "payers": len(results)},
        )
        return BatchResult(key=key, receiver=receiver, results=results)
