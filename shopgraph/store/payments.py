"""
Order payments are polymorphic: a credit card, debit card or PayPal payment.

Records carry an explicit `paymentType` tag, which is what the pydantic discriminated union keys on.
Legacy records without the tag are classified by `sniff_payment_type`, which looks for the attribute
only one of the variants has. A record matching more than one variant is rejected, never guessed.
"""
__all__ = [
    "CreditPaymentRecord",
    "DebitPaymentRecord",
    "PayPalPaymentRecord",
    "PaymentRecord",
    "PaymentType",
    "load_payment_records",
    "parse_payment",
    "sniff_payment_type",
]

import enum
import functools
import json
import logging
import pathlib
import typing

import pydantic
import pydantic.alias_generators

from shopgraph._app_settings import app_settings
from shopgraph._base.exceptions import AmbiguousPaymentError, UnknownPaymentError

logger = logging.getLogger(__name__)


class PaymentType(enum.StrEnum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    PAYPAL = "PAYPAL"


# checked in this order; the attribute is present in one variant only
_SNIFFED_ATTRIBUTES: tuple[tuple[str, PaymentType], ...] = (
    ("authorizationCode", PaymentType.CREDIT),
    ("bankAuthCode", PaymentType.DEBIT),
    ("chargeBack", PaymentType.PAYPAL),
)


class _BasePaymentRecord(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=pydantic.alias_generators.to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: int
    total: float


class CreditPaymentRecord(_BasePaymentRecord):
    payment_type: typing.Literal["CREDIT"] = "CREDIT"
    authorization_code: str


class DebitPaymentRecord(_BasePaymentRecord):
    payment_type: typing.Literal["DEBIT"] = "DEBIT"
    bank_auth_code: str


class PayPalPaymentRecord(_BasePaymentRecord):
    payment_type: typing.Literal["PAYPAL"] = "PAYPAL"
    charge_back: bool


PaymentRecord = typing.Annotated[
    CreditPaymentRecord | DebitPaymentRecord | PayPalPaymentRecord,
    pydantic.Field(discriminator="payment_type"),
]

_payment_adapter: pydantic.TypeAdapter[PaymentRecord] = pydantic.TypeAdapter(PaymentRecord)


def sniff_payment_type(record: typing.Mapping[str, typing.Any]) -> PaymentType:
    """
    Determine the payment variant of an untagged record by the presence of a variant-specific attribute.
    :raises UnknownPaymentError: If the record has none of the attributes.
    :raises AmbiguousPaymentError: If the record has attributes of more than one variant.
    """
    matches = [payment_type for attr, payment_type in _SNIFFED_ATTRIBUTES if record.get(attr) is not None]
    if not matches:
        raise UnknownPaymentError(record=record)
    if len(matches) > 1:
        raise AmbiguousPaymentError(record=record, candidates=tuple(m.value for m in matches))
    return matches[0]


def parse_payment(record: typing.Mapping[str, typing.Any]) -> PaymentRecord:
    """
    Parse a raw payment record (camelCase keys) into its concrete variant.
    :raises PaymentDiscriminationError: If an untagged record can't be classified.
    :raises pydantic.ValidationError: If the record doesn't fit its variant.
    """
    if record.get("paymentType") is None and record.get("payment_type") is None:
        logger.debug("Payment record `%s` has no payment type, sniffing it.", record.get("id"))
        record = {**record, "paymentType": sniff_payment_type(record).value}
    return _payment_adapter.validate_python(record)


def load_payment_records(path: pathlib.Path | None = None) -> list[PaymentRecord]:
    return list(_load_payment_records(path or app_settings.PAYMENTS.FIXTURE_PATH))


@functools.cache
def _load_payment_records(path: pathlib.Path) -> tuple[PaymentRecord, ...]:
    with path.open(encoding="utf-8") as f:
        raw_records = json.load(f)
    return tuple(parse_payment(raw) for raw in raw_records)
