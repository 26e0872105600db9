from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

RateTable = dict[str, float]


class RateFetchError(RuntimeError):
    """Raised when a provider cannot produce a usable rate table."""


def parse_rates_payload(base: str, payload: Any) -> RateTable:
    """Validate a provider payload of the form ``{"success": ..., "error": ..., "rates": {...}}``.

    Returns the rate table with the base currency pinned to 1.0. Any deviation
    from the contract raises :class:`RateFetchError`.
    """
    if not isinstance(payload, dict):
        raise RateFetchError(f"Unexpected payload type {type(payload).__name__} for base={base}")

    if payload.get("success") is not True:
        raise RateFetchError(f"Provider reported failure for base={base}: {_describe_error(payload)}")

    raw_rates = payload.get("rates")
    if not isinstance(raw_rates, dict) or not raw_rates:
        raise RateFetchError(f"Provider payload has no rates for base={base}")

    rates: RateTable = {}
    for code, value in raw_rates.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise RateFetchError(f"Invalid rate {value!r} for {code} in base={base}")
        rates[str(code).upper()] = float(value)
    rates.setdefault(base, 1.0)
    return rates


def _describe_error(payload: dict[str, Any]) -> str:
    error = payload.get("error")
    if isinstance(error, dict):
        parts = [str(error[key]) for key in ("code", "type", "info") if error.get(key)]
        return " ".join(parts) or "no details provided"
    if error:
        return str(error)
    return "no details provided"


class RateProvider(ABC):
    name: str

    @abstractmethod
    async def fetch_rates(self, base: str) -> RateTable:
        raise NotImplementedError

    async def close(self) -> None:
        return None
