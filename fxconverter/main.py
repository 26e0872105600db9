from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fxconverter.api.routes import router
from fxconverter.config import get_settings
from fxconverter.logging import configure_logging
from fxconverter.providers import HttpRateProvider
from fxconverter.services.cache import CacheClient
from fxconverter.services.converter import Converter
from fxconverter.services.rates import RateStore
from fxconverter.services.sequencing import SessionGates

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache_client = CacheClient(settings.redis_url)
    await cache_client.connect()

    provider = HttpRateProvider(
        settings.rates_api_url,
        api_key=settings.rates_api_key,
        timeout_seconds=settings.request_timeout_seconds,
    )
    rate_store = RateStore(
        provider,
        cache_client,
        ttl_ms=settings.rates_cache_ttl_seconds * 1000,
    )
    app.state.cache_client = cache_client
    app.state.rate_store = rate_store
    app.state.session_gates = SessionGates()
    app.state.converter = Converter(
        rate_store,
        max_amount=settings.max_amount,
        report_error=lambda message: logger.info("Conversion error reported: %s", message),
    )

    yield

    await provider.close()
    await cache_client.close()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.include_router(router, prefix=settings.api_prefix)
