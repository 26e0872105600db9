from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

# Last-resort cross rates, used only when neither the cache nor the provider has data.
_SEED: dict[str, dict[str, float]] = {
    "USD": {"USD": 1.0, "EUR": 0.92, "GBP": 0.79, "JPY": 150.25, "AUD": 1.52},
    "EUR": {"USD": 1.09, "EUR": 1.0, "GBP": 0.86, "JPY": 163.50, "AUD": 1.66},
    "GBP": {"USD": 1.27, "EUR": 1.16, "GBP": 1.0, "JPY": 190.50, "AUD": 1.93},
    "JPY": {"USD": 0.0067, "EUR": 0.0061, "GBP": 0.0052, "JPY": 1.0, "AUD": 0.0101},
    "AUD": {"USD": 0.66, "EUR": 0.60, "GBP": 0.52, "JPY": 99.01, "AUD": 1.0},
}

FALLBACK_RATES: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {base: MappingProxyType(dict(table)) for base, table in _SEED.items()}
)


def supported_currencies(fallback: Mapping[str, Mapping[str, float]] = FALLBACK_RATES) -> list[str]:
    codes: set[str] = set(fallback)
    for table in fallback.values():
        codes.update(table)
    return sorted(codes)
