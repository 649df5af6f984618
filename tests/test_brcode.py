"""Tests for the BR Code payload builder and decoder."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from pixqr.brcode import (
    Receiver,
    build_payload,
    decode_payload,
    encode_payload,
    normalize_receiver,
)
from pixqr.errors import FieldTooLongError, InvalidFieldError, MissingFieldError, ServiceError
from pixqr.keys import KeyKind, PaymentKey
from pixqr.tlv import parse_tlv
from tests.conftest import reference_crc

GOLDEN = (
    "00020126400014BR.GOV.BCB.PIX0118fulano@example.com"
    "520400005303986540510.005802BR5913FULANO DE TAL6009SAO PAULO"
    "62110507PEDIDO16304FA6A"
)
GOLDEN_OPEN_AMOUNT = (
    "00020126400014BR.GOV.BCB.PIX0118fulano@example.com"
    "52040000530398658"
    "02BR5913FULANO DE TAL6009SAO PAULO62070503***6304E087"
)


def top_level(payload: str) -> dict[str, str]:
    return {item.tag: item.value for item in parse_tlv(payload)}


class TestBuildPayloadGolden:
    def test_email_scenario(self, email_key, receiver) -> None:
        assert build_payload(email_key, receiver, amount="10.00", reference="PEDIDO1") == GOLDEN

    def test_open_amount_without_reference(self, email_key, receiver) -> None:
        assert build_payload(email_key, receiver) == GOLDEN_OPEN_AMOUNT

    def test_phone_key_with_accented_receiver(self) -> None:
        payload = build_payload(
            PaymentKey(KeyKind.PHONE, "(11) 98765-4321"),
            Receiver(name="José da Silva", city="São Paulo"),
            amount="1234.5",
            reference="ABC123",
        )
        assert payload == (
            "00020126360014BR.GOV.BCB.PIX0114+5511987654321"
            "520400005303986" "54071234.50" "5802BR5913JOSE DA SILVA6009SAO PAULO"
            "62100506ABC1236304C10C"
        )

    def test_description_subfield(self, email_key, receiver) -> None:
        payload = build_payload(email_key, receiver, "10.00", "PEDIDO1", description="Mensalidade")
        assert payload.startswith("00020126550014BR.GOV.BCB.PIX0118fulano@example.com0211Mensalidade5204")
        assert payload.endswith("6304" + "6572")


class TestBuildPayloadProperties:
    def test_starts_with_format_indicator(self, email_key, receiver) -> None:
        assert build_payload(email_key, receiver, "1.00", "X").startswith("000201")

    @pytest.mark.parametrize(
        ("amount", "reference"),
        [("10.00", "PEDIDO1"), (None, None), ("0.01", ""), ("999999999.99", "R" * 25)],
    )
    def test_trailer_is_crc_of_prefix(self, email_key, receiver, amount, reference) -> None:
        payload = build_payload(email_key, receiver, amount, reference)
        assert payload[-8:-4] == "6304"
        assert payload[-4:] == reference_crc(payload[:-4])
        assert payload[-4:] == payload[-4:].upper()

    def test_idempotent(self, email_key, receiver) -> None:
        first = build_payload(email_key, receiver, "10.00", "PEDIDO1")
        second = build_payload(email_key, receiver, "10.00", "PEDIDO1")
        assert first == second

    def test_concurrent_calls_agree(self, email_key, receiver) -> None:
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: build_payload(email_key, receiver, "10.00", "PEDIDO1"), range(32)))
        assert set(results) == {GOLDEN}

    def test_encode_payload_exposes_crc(self, email_key, receiver) -> None:
        encoded = encode_payload(email_key, receiver, "10.00", "PEDIDO1")
        assert encoded.payload == GOLDEN
        assert encoded.crc == "FA6A"

    def test_field_order(self, email_key, receiver) -> None:
        payload = build_payload(email_key, receiver, "10.00", "PEDIDO1")
        assert [item.tag for item in parse_tlv(payload)] == ["00", "26", "52", "53", "54", "58", "59", "60", "62", "63"]


class TestAmountField:
    def test_absent_amount_has_no_field(self, email_key, receiver) -> None:
        payload = build_payload(email_key, receiver, amount=None)
        assert "54" not in top_level(payload)
        assert len(payload) < len(build_payload(email_key, receiver, amount="10.00"))

    def test_zero_amount_omitted(self, email_key, receiver) -> None:
        assert build_payload(email_key, receiver, amount="0.00") == GOLDEN_OPEN_AMOUNT

    def test_amount_formatted(self, email_key, receiver) -> None:
        assert top_level(build_payload(email_key, receiver, amount="7"))["54"] == "7.00"

    def test_invalid_amount(self, email_key, receiver) -> None:
        with pytest.raises(InvalidFieldError):
            build_payload(email_key, receiver, amount="ten")


class TestReceiverFields:
    def test_name_of_25_bytes_unmodified(self, email_key) -> None:
        name = "A" * 25
        fields = top_level(build_payload(email_key, Receiver(name=name, city="RECIFE")))
        assert fields["59"] == name

    def test_name_of_26_bytes_truncated(self, email_key) -> None:
        fields = top_level(build_payload(email_key, Receiver(name="B" * 26, city="RECIFE")))
        assert fields["59"] == "B" * 25

    def test_city_truncated_to_15(self, email_key) -> None:
        fields = top_level(build_payload(email_key, Receiver(name="LOJA", city="Sao Bernardo do Campo")))
        assert fields["60"] == "SAO BERNARDO DO"

    def test_normalize_receiver(self) -> None:
        assert normalize_receiver(Receiver(name=" Padaria  Pão ", city="Maceió")) == Receiver(
            name="PADARIA PAO", city="MACEIO"
        )


class TestReferenceField:
    def test_empty_reference_placeholder(self, email_key, receiver) -> None:
        fields = top_level(build_payload(email_key, receiver, reference=""))
        assert fields["62"] == "0503***"

    def test_reference_truncated_to_25(self, email_key, receiver) -> None:
        fields = top_level(build_payload(email_key, receiver, reference="R" * 30))
        assert fields["62"] == "0525" + "R" * 25


class TestBuildPayloadErrors:
    def test_missing_key(self, receiver) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            build_payload(PaymentKey(KeyKind.CPF, "   "), receiver)
        assert exc_info.value.field == "key"

    def test_missing_name(self, email_key) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            build_payload(email_key, Receiver(name="☕", city="RECIFE"))
        assert exc_info.value.field == "name"

    def test_missing_city(self, email_key) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            build_payload(email_key, Receiver(name="LOJA", city="  "))
        assert exc_info.value.field == "city"

    def test_key_overflows_merchant_account_template(self, receiver) -> None:
        key = PaymentKey(KeyKind.EMAIL, "a" * 70 + "@example.com")
        with pytest.raises(FieldTooLongError) as exc_info:
            build_payload(key, receiver)
        assert exc_info.value.tag == "26"

    def test_errors_are_service_errors(self) -> None:
        assert issubclass(MissingFieldError, ServiceError)
        assert issubclass(FieldTooLongError, ServiceError)


class TestDecodePayload:
    def test_round_trip_of_golden(self) -> None:
        decoded = decode_payload(GOLDEN)
        assert decoded.key == "fulano@example.com"
        assert decoded.name == "FULANO DE TAL"
        assert decoded.city == "SAO PAULO"
        assert decoded.amount == "10.00"
        assert decoded.reference == "PEDIDO1"
        assert decoded.description is None
        assert decoded.crc == "FA6A"

    def test_open_amount(self) -> None:
        assert decode_payload(GOLDEN_OPEN_AMOUNT).amount is None

    def test_tampered_payload(self) -> None:
        with pytest.raises(ServiceError) as exc_info:
            decode_payload(GOLDEN.replace("10.00", "99.00"))
        assert exc_info.value.code == "ERR_CRC_MISMATCH"

    def test_missing_trailer(self) -> None:
        with pytest.raises(ServiceError) as exc_info:
            decode_payload("000201")
        assert exc_info.value.code == "ERR_BAD_PAYLOAD"

    def test_dynamic_payload_without_key(self) -> None:
        payload = (
            "00020101021226880014br.gov.bcb.pix2566qrcode.microcashif.com.br/pix/"
            "971f24d3-c3f9-48c3-96c0-65be7569fea35204000053039865802BR"
            "5924PAG INTERMEDIACOES DE VE6015SAO BERNARDO DO62070503***6304256A"
        )
        with pytest.raises(ServiceError) as exc_info:
            decode_payload(payload)
        assert exc_info.value.code == "ERR_BAD_PAYLOAD"
