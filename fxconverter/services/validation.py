from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from fxconverter.schemas import ConversionFailure

MAX_AMOUNT = Decimal("1000000000")


@dataclass(frozen=True, slots=True)
class AmountValidation:
    value: Decimal | None = None
    failure: ConversionFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok


def validate_amount(raw: str | None, max_amount: Decimal | float = MAX_AMOUNT) -> AmountValidation:
    text = (raw or "").strip()
    if not text:
        return AmountValidation(failure=ConversionFailure.empty_input)

    try:
        value = Decimal(text)
    except InvalidOperation:
        return AmountValidation(failure=ConversionFailure.not_a_number)
    if not value.is_finite():
        return AmountValidation(failure=ConversionFailure.not_a_number)

    if value <= 0:
        return AmountValidation(failure=ConversionFailure.non_positive)
    if value > Decimal(str(max_amount)):
        return AmountValidation(failure=ConversionFailure.too_large)
    return AmountValidation(value=value)


def is_valid_amount(raw: str | None, max_amount: Decimal | float = MAX_AMOUNT) -> bool:
    return validate_amount(raw, max_amount).ok
