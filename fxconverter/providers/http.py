from __future__ import annotations

import logging

import httpx

from fxconverter.providers.base import RateFetchError, RateProvider, RateTable, parse_rates_payload

logger = logging.getLogger(__name__)


class HttpRateProvider(RateProvider):
    name = "exchangerate_host"

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers={"User-Agent": "fxconverter/1.0"},
            transport=transport,
        )

    async def fetch_rates(self, base: str) -> RateTable:
        params = {"base": base.upper()}
        if self._api_key:
            params["access_key"] = self._api_key

        try:
            response = await self._client.get(self._base_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise RateFetchError(f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise RateFetchError(f"Non-JSON response for base={base}") from exc

        rates = parse_rates_payload(base.upper(), payload)
        logger.info("Fetched %s rates for base=%s", len(rates), base)
        return rates

    async def close(self) -> None:
        await self._client.aclose()
