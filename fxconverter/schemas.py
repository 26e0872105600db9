from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class ConversionFailure(StrEnum):
    empty_input = "empty_input"
    not_a_number = "not_a_number"
    non_positive = "non_positive"
    too_large = "too_large"
    rates_unavailable = "rates_unavailable"
    unknown_currency_pair = "unknown_currency_pair"


class ConversionRequest(BaseModel):
    # Raw user input; parsed by validate_amount so every failure stays typed.
    amount: str
    from_currency: str = Field(..., min_length=3, max_length=3)
    to_currency: str = Field(..., min_length=3, max_length=3)
    swap: bool = False
    # Callers issuing overlapping conversions tag them with a session key;
    # only the newest conversion per session gets a result back.
    session_id: str | None = Field(default=None, max_length=128)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("from_currency", "to_currency", mode="before")
    @classmethod
    def _validate_currency(cls, value: str) -> str:
        return str(value).strip().upper()

    def swapped(self) -> ConversionRequest:
        return self.model_copy(
            update={
                "from_currency": self.to_currency,
                "to_currency": self.from_currency,
                "swap": False,
            }
        )


class ConversionOut(BaseModel):
    ok: bool
    from_currency: str
    to_currency: str
    amount: float | None = None
    rate: float | None = None
    display_amount: str | None = None
    display_rate: str | None = None
    failure: ConversionFailure | None = None
    message: str | None = None
    superseded: bool = False


class RatesOut(BaseModel):
    base: str
    rates: dict[str, float]


class CurrenciesOut(BaseModel):
    currencies: list[str]
    default_from_currency: str
    default_to_currency: str


class HealthOut(BaseModel):
    status: str
    cache: str
