from __future__ import annotations

import json
import logging
import math
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from fxconverter.providers.base import RateProvider, RateTable
from fxconverter.services.cache import KeyValueStore
from fxconverter.services.fallback import FALLBACK_RATES

logger = logging.getLogger(__name__)

RATES_CACHE_PREFIX = "exchangeRates_"
RATES_TIMESTAMP_PREFIX = "exchangeRatesTimestamp_"
CACHE_DURATION_MS = 12 * 60 * 60 * 1000

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


def rates_cache_key(base: str) -> str:
    return f"{RATES_CACHE_PREFIX}{base}"


def timestamp_cache_key(base: str) -> str:
    return f"{RATES_TIMESTAMP_PREFIX}{base}"


@dataclass(frozen=True, slots=True)
class CacheEntry:
    base: str
    rates: RateTable
    timestamp_ms: int

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp_ms


class RateStore:
    """Resolves the best available rate table for a base currency.

    Precedence is fresh cache, then a live fetch, then the cached entry at any
    age, then the static fallback table. Only a successful fetch writes to the
    cache; cache failures are logged and treated as a miss.
    """

    def __init__(
        self,
        provider: RateProvider,
        cache: KeyValueStore,
        *,
        ttl_ms: int = CACHE_DURATION_MS,
        fallback: Mapping[str, Mapping[str, float]] = FALLBACK_RATES,
        clock: Clock = wall_clock_ms,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._ttl_ms = ttl_ms
        self._fallback = fallback
        self._clock = clock

    async def get_rates(self, base: str) -> RateTable | None:
        entry = await self._read_entry(base)
        now = self._clock()
        if entry is not None and entry.age_ms(now) <= self._ttl_ms:
            logger.debug("Rate cache hit base=%s age_ms=%s", base, entry.age_ms(now))
            return dict(entry.rates)

        try:
            rates = await self._provider.fetch_rates(base)
        except Exception as exc:
            logger.warning(
                "Rate fetch failed provider=%s base=%s: %s",
                self._provider.name,
                base,
                _format_exception_message(exc),
            )
            return self._degraded(base, entry)

        await self._write_entry(CacheEntry(base=base, rates=dict(rates), timestamp_ms=self._clock()))
        return rates

    def _degraded(self, base: str, entry: CacheEntry | None) -> RateTable | None:
        if entry is not None:
            logger.warning("Serving stale cached rates base=%s", base)
            return dict(entry.rates)
        fallback = self._fallback.get(base)
        if fallback is not None:
            logger.warning("Serving static fallback rates base=%s", base)
            return dict(fallback)
        logger.warning("No rates available base=%s", base)
        return None

    async def _read_entry(self, base: str) -> CacheEntry | None:
        try:
            raw_rates = await self._cache.get(rates_cache_key(base))
            raw_timestamp = await self._cache.get(timestamp_cache_key(base))
        except Exception as exc:
            logger.warning("Rate cache read failed base=%s: %s", base, exc)
            return None
        if raw_rates is None or raw_timestamp is None:
            return None

        rates = _decode_rates(raw_rates)
        timestamp = _decode_timestamp(raw_timestamp)
        if rates is None or timestamp is None:
            logger.warning("Invalid cached rates at base=%s; ignoring", base)
            return None
        return CacheEntry(base=base, rates=rates, timestamp_ms=timestamp)

    async def _write_entry(self, entry: CacheEntry) -> None:
        try:
            await self._cache.set(rates_cache_key(entry.base), json.dumps(entry.rates))
            await self._cache.set(timestamp_cache_key(entry.base), str(entry.timestamp_ms))
        except Exception as exc:
            logger.warning("Rate cache write failed base=%s: %s", entry.base, exc)


def _decode_rates(raw: str) -> RateTable | None:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict) or not payload:
        return None

    rates: RateTable = {}
    for code, value in payload.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value) or value <= 0:
            return None
        rates[code] = float(value)
    return rates


def _decode_timestamp(raw: str) -> int | None:
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def _format_exception_message(exc: Exception) -> str:
    message = str(exc).strip()
    if message:
        return f"{type(exc).__name__}: {message}"
    return f"{type(exc).__name__}: no details provided"
