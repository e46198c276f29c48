"""Build EMVCo-style (VietQR) payment payloads with a CRC-16 checksum.

Each field is ``ID + LEN + VALUE`` where ID and LEN are two ASCII digits and
LEN is the UTF-8 byte length of VALUE. The payload ends with field ``63``
whose value is the CRC-16/CCITT-FALSE of everything before it, including the
``6304`` header itself.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, Mapping, Optional, Tuple

from orderflow.core.models import BankPaymentConfig, Order
from orderflow.core.utils import strip_diacritics

logger = logging.getLogger(__name__)

DEFAULT_BANK_BINS: Dict[str, str] = {
    "VCB": "970436", "VIETCOMBANK": "970436",
    "TCB": "970407", "TECHCOMBANK": "970407",
    "MB": "970422", "MBBANK": "970422",
    "ACB": "970416",
    "VPB": "970432", "VPBANK": "970432",
    "BIDV": "970418",
    "CTG": "970415", "VIETINBANK": "970415",
    "STB": "970403", "SACOMBANK": "970403",
    "TPB": "970423", "TPBANK": "970423",
    "VIB": "970441",
    "MSB": "970426",
    "HDB": "970437", "HDBANK": "970437",
    "OCB": "970448",
    "SHB": "970443",
    "LPB": "970449", "LIENVIETPOSTBANK": "970449",
    "SEAB": "970440", "SEABANK": "970440",
    "NAB": "970428", "NAMABANK": "970428",
    "BAB": "970409", "BACABANK": "970409",
    "ABB": "970425", "ABBANK": "970425",
    "VCCB": "970454", "VIETCAPITAL": "970454",
    "SCB": "970429",
    "EIB": "970431", "EXIMBANK": "970431",
    "TIMO": "961023",
    "VIETMONEY": "970422",
    "CAKE": "970432",
    "UOB": "970458",
    "CIMB": "422589",
}
FALLBACK_BIN = DEFAULT_BANK_BINS["MB"]

NAPAS_GUID = "A000000727"
SERVICE_CODE = "QRIBFTTA"
CURRENCY_VND = "704"
COUNTRY_CODE = "VN"
REFERENCE_MAX_LENGTH = 20
MAX_FIELD_LENGTH = 99


class BankDirectory:
    """Bank code to routing (BIN) code table, built once and passed around."""

    def __init__(
        self,
        bins: Optional[Mapping[str, str]] = None,
        fallback: str = FALLBACK_BIN,
    ) -> None:
        table = dict(DEFAULT_BANK_BINS if bins is None else bins)
        self._bins = {code.strip().upper(): value for code, value in table.items()}
        self.fallback = fallback

    def with_overrides(self, overrides: Mapping[str, str]) -> "BankDirectory":
        merged = dict(self._bins)
        merged.update({code.strip().upper(): value for code, value in overrides.items()})
        return BankDirectory(merged, fallback=self.fallback)

    def resolve(self, bank_id: str) -> Tuple[str, bool]:
        """Return ``(routing_code, used_fallback)`` for a bank code."""

        code = (bank_id or "").strip().upper()
        if code in self._bins:
            return self._bins[code], False
        return self.fallback, True

    def __contains__(self, bank_id: str) -> bool:
        return (bank_id or "").strip().upper() in self._bins


DEFAULT_DIRECTORY = BankDirectory()


def format_field(field_id: str, value: str) -> str:
    """Encode one TLV field, e.g. ``format_field("00", "01") == "000201"``."""

    length = len(value.encode("utf-8"))
    if length > MAX_FIELD_LENGTH:
        logger.warning(
            "Field %s is %d bytes long; the two-digit length limit is %d", field_id, length, MAX_FIELD_LENGTH
        )
    return f"{field_id}{length:02d}{value}"


def crc16_ccitt(data: str) -> str:
    """CRC-16/CCITT-FALSE (poly 0x1021, init 0xFFFF) as four uppercase hex digits."""

    crc = 0xFFFF
    for byte in data.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return f"{crc:04X}"


def normalize_reference(text: str) -> str:
    """Make a transfer note safe for banking apps: ASCII letters, digits, spaces, max 20 chars."""

    ascii_text = re.sub(r"[^A-Za-z0-9 ]", "", strip_diacritics(text or ""))
    return ascii_text[:REFERENCE_MAX_LENGTH]


class PaymentPayloadEncoder:
    """Assemble dynamic (one-time) transfer payloads for a bank directory."""

    def __init__(self, directory: Optional[BankDirectory] = None) -> None:
        self.directory = directory or DEFAULT_DIRECTORY

    def encode(self, bank_id: str, account_no: str, amount: int, reference: str) -> str:
        routing_code, used_fallback = self.directory.resolve(bank_id)
        if used_fallback:
            logger.warning(
                "Unknown bank code %r; using fallback routing code %s", bank_id, routing_code
            )
        if amount < 0:
            logger.warning("Negative payment amount %s clamped to 0", amount)
            amount = 0

        beneficiary = format_field("00", routing_code) + format_field("01", account_no)
        merchant_info = (
            format_field("00", NAPAS_GUID)
            + format_field("01", beneficiary)
            + format_field("02", SERVICE_CODE)
        )

        payload = (
            format_field("00", "01")
            + format_field("01", "12")
            + format_field("38", merchant_info)
            + format_field("53", CURRENCY_VND)
            + format_field("54", str(int(round(amount))))
            + format_field("58", COUNTRY_CODE)
            + format_field("62", format_field("08", normalize_reference(reference)))
        )
        payload += "6304"
        return payload + crc16_ccitt(payload)


DEFAULT_ENCODER = PaymentPayloadEncoder(DEFAULT_DIRECTORY)


def build_payment_payload(
    bank_id: str,
    account_no: str,
    amount: int,
    reference: str,
    encoder: Optional[PaymentPayloadEncoder] = None,
) -> str:
    """Encode with ``encoder``, or with the shared default bank directory."""

    return (encoder or DEFAULT_ENCODER).encode(bank_id, account_no, amount, reference)


def payload_for_order(
    order: Order,
    bank_config: BankPaymentConfig,
    encoder: Optional[PaymentPayloadEncoder] = None,
) -> str:
    """Payload asking for the order total with ``DH <order id>`` as the note."""

    return (encoder or DEFAULT_ENCODER).encode(
        bank_config.bank_id, bank_config.account_no, order.total_price, f"DH {order.id}"
    )


def verify_payload(payload: str) -> bool:
    """Check that the trailing checksum matches the rest of the payload."""

    if len(payload) < 8 or payload[-8:-4] != "6304":
        return False
    return crc16_ccitt(payload[:-4]) == payload[-4:].upper()
