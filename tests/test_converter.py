from __future__ import annotations

import json
from decimal import Decimal

import pytest

from fxconverter.providers.base import RateFetchError, RateProvider, RateTable
from fxconverter.schemas import ConversionFailure, ConversionRequest
from fxconverter.services.cache import MemoryStore
from fxconverter.services.converter import Converter
from fxconverter.services.rates import (
    CACHE_DURATION_MS,
    RateStore,
    rates_cache_key,
    timestamp_cache_key,
)

NOW_MS = 1_760_000_000_000


class _FakeProvider(RateProvider):
    name = "fake"

    def __init__(self, rates: RateTable | None = None, error: Exception | None = None) -> None:
        self.rates = rates
        self.error = error
        self.calls: list[str] = []

    async def fetch_rates(self, base: str) -> RateTable:
        self.calls.append(base)
        if self.error is not None:
            raise self.error
        assert self.rates is not None
        return self.rates


class _RecordingStore:
    def __init__(self, rates: RateTable | None) -> None:
        self.rates = rates
        self.calls: list[str] = []

    async def get_rates(self, base: str) -> RateTable | None:
        self.calls.append(base)
        return self.rates


def _request(amount: str, source: str = "USD", target: str = "EUR") -> ConversionRequest:
    return ConversionRequest(amount=amount, from_currency=source, to_currency=target)


async def _seed(cache: MemoryStore, base: str, rates: dict, timestamp_ms: int) -> None:
    await cache.set(rates_cache_key(base), json.dumps(rates))
    await cache.set(timestamp_cache_key(base), str(timestamp_ms))


@pytest.mark.asyncio
async def test_convert_uses_fresh_cache_without_fetch() -> None:
    cache = MemoryStore()
    await _seed(cache, "USD", {"USD": 1, "EUR": 0.92}, NOW_MS - 1000)
    provider = _FakeProvider(error=AssertionError("fetch must not be called"))
    converter = Converter(RateStore(provider, cache, clock=lambda: NOW_MS))

    result = await converter.convert(_request("100"))

    assert result.ok
    assert result.display_amount == "92.00"
    assert result.display_rate == "1 USD = 0.9200 EUR"
    assert provider.calls == []


@pytest.mark.asyncio
async def test_convert_fetches_and_caches_when_cache_empty() -> None:
    cache = MemoryStore()
    provider = _FakeProvider(rates={"USD": 1, "EUR": 0.92})
    converter = Converter(RateStore(provider, cache, clock=lambda: NOW_MS))

    result = await converter.convert(_request("100"))

    assert result.display_amount == "92.00"
    assert provider.calls == ["USD"]
    assert json.loads(await cache.get(rates_cache_key("USD"))) == {"USD": 1, "EUR": 0.92}
    assert await cache.get(timestamp_cache_key("USD")) == str(NOW_MS)


@pytest.mark.asyncio
async def test_convert_falls_back_to_stale_cache_on_network_error() -> None:
    cache = MemoryStore()
    await _seed(cache, "USD", {"USD": 1, "EUR": 0.90}, NOW_MS - CACHE_DURATION_MS - 1)
    provider = _FakeProvider(error=RateFetchError("ConnectError: network unreachable"))
    converter = Converter(RateStore(provider, cache, clock=lambda: NOW_MS))

    result = await converter.convert(_request("100"))

    assert result.display_amount == "90.00"
    assert result.rate == Decimal("0.9")


@pytest.mark.asyncio
async def test_invalid_amount_skips_rate_lookup_and_reports_error() -> None:
    store = _RecordingStore({"USD": 1.0, "EUR": 0.92})
    messages: list[str] = []
    converter = Converter(store, report_error=messages.append)

    result = await converter.convert(_request("abc"))

    assert not result.ok
    assert result.failure == ConversionFailure.not_a_number
    assert result.amount is None
    assert result.display_amount is None
    assert store.calls == []
    assert messages == ["Please enter a valid number."]


@pytest.mark.asyncio
async def test_too_large_message_mentions_limit() -> None:
    messages: list[str] = []
    converter = Converter(_RecordingStore(None), report_error=messages.append)

    result = await converter.convert(_request("1000000001"))

    assert result.failure == ConversionFailure.too_large
    assert messages == ["Amount must not exceed 1,000,000,000.00."]


@pytest.mark.asyncio
@pytest.mark.parametrize("rates", [None, {"USD": 1.0}])
async def test_same_currency_short_circuits(rates: RateTable | None) -> None:
    store = _RecordingStore(rates)
    converter = Converter(store)

    result = await converter.convert(_request("250.5", "EUR", "EUR"))

    assert result.ok
    assert result.rate == Decimal("1")
    assert result.amount == Decimal("250.5")
    assert store.calls == []


@pytest.mark.asyncio
async def test_missing_rates_fail_with_rates_unavailable() -> None:
    messages: list[str] = []
    converter = Converter(_RecordingStore(None), report_error=messages.append)

    result = await converter.convert(_request("10", "CHF", "EUR"))

    assert result.failure == ConversionFailure.rates_unavailable
    assert len(messages) == 1


@pytest.mark.asyncio
async def test_unknown_target_fails_with_unknown_pair() -> None:
    store = _RecordingStore({"USD": 1.0, "EUR": 0.92})
    converter = Converter(store)

    result = await converter.convert(_request("10", "USD", "XYZ"))

    assert result.failure == ConversionFailure.unknown_currency_pair
    assert result.message == "No exchange rate from USD to XYZ. Please try again later."
    assert store.calls == ["USD"]


@pytest.mark.asyncio
async def test_swapped_request_converts_in_reverse() -> None:
    store = _RecordingStore({"EUR": 1.0, "USD": 1.09})
    converter = Converter(store)
    request = _request("100", "usd", "eur").swapped()

    result = await converter.convert(request)

    assert (result.from_currency, result.to_currency) == ("EUR", "USD")
    assert result.display_amount == "109.00"
    assert store.calls == ["EUR"]
