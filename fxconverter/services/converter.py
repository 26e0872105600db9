from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from fxconverter.providers.base import RateTable
from fxconverter.schemas import ConversionFailure, ConversionRequest
from fxconverter.services.formatting import format_amount, format_rate_line
from fxconverter.services.validation import MAX_AMOUNT, validate_amount

logger = logging.getLogger(__name__)

ErrorReporter = Callable[[str], None]


class SupportsRates(Protocol):
    async def get_rates(self, base: str) -> RateTable | None: ...


@dataclass(frozen=True, slots=True)
class ConversionResult:
    from_currency: str
    to_currency: str
    amount: Decimal | None = None
    rate: Decimal | None = None
    failure: ConversionFailure | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def display_amount(self) -> str | None:
        if self.amount is None:
            return None
        return format_amount(self.amount)

    @property
    def display_rate(self) -> str | None:
        if self.rate is None:
            return None
        return format_rate_line(self.from_currency, self.to_currency, self.rate)


class Converter:
    """Validates an amount, resolves a rate through the rate store and multiplies.

    Holds no per-call state; concurrent ``convert`` calls are independent.
    Failures are returned as typed results and also sent to ``report_error``.
    """

    def __init__(
        self,
        rate_store: SupportsRates,
        *,
        max_amount: Decimal | float = MAX_AMOUNT,
        report_error: ErrorReporter | None = None,
    ) -> None:
        self._rate_store = rate_store
        self._max_amount = Decimal(str(max_amount))
        self._report_error = report_error

    async def convert(self, request: ConversionRequest) -> ConversionResult:
        source = request.from_currency
        target = request.to_currency

        validation = validate_amount(request.amount, self._max_amount)
        if not validation:
            return self._fail(source, target, validation.failure)
        amount = validation.value

        if source == target:
            return ConversionResult(
                from_currency=source, to_currency=target, amount=amount, rate=Decimal("1")
            )

        rates = await self._rate_store.get_rates(source)
        if rates is None:
            return self._fail(source, target, ConversionFailure.rates_unavailable)

        rate_value = rates.get(target)
        if rate_value is None:
            return self._fail(source, target, ConversionFailure.unknown_currency_pair)

        rate = Decimal(str(rate_value))
        return ConversionResult(
            from_currency=source,
            to_currency=target,
            amount=amount * rate,
            rate=rate,
        )

    def describe(self, failure: ConversionFailure, source: str, target: str) -> str:
        if failure == ConversionFailure.empty_input:
            return "Please enter an amount."
        if failure == ConversionFailure.not_a_number:
            return "Please enter a valid number."
        if failure == ConversionFailure.non_positive:
            return "Amount must be greater than zero."
        if failure == ConversionFailure.too_large:
            return f"Amount must not exceed {format_amount(self._max_amount)}."
        if failure == ConversionFailure.rates_unavailable:
            return "Exchange rates are unavailable right now. Please try again later."
        return f"No exchange rate from {source} to {target}. Please try again later."

    def _fail(self, source: str, target: str, failure: ConversionFailure) -> ConversionResult:
        message = self.describe(failure, source, target)
        logger.info("Conversion failed %s->%s reason=%s", source, target, failure.value)
        if self._report_error is not None:
            self._report_error(message)
        return ConversionResult(
            from_currency=source,
            to_currency=target,
            failure=failure,
            message=message,
        )
