from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from fxconverter.config import get_settings
from fxconverter.schemas import (
    ConversionOut,
    ConversionRequest,
    CurrenciesOut,
    HealthOut,
    RatesOut,
)
from fxconverter.services.cache import CacheClient
from fxconverter.services.converter import ConversionResult, Converter
from fxconverter.services.fallback import supported_currencies
from fxconverter.services.rates import RateStore
from fxconverter.services.sequencing import SessionGates

router = APIRouter()


def get_converter(request: Request) -> Converter:
    return request.app.state.converter


def get_rate_store(request: Request) -> RateStore:
    return request.app.state.rate_store


def get_cache_client(request: Request) -> CacheClient:
    return request.app.state.cache_client


def get_session_gates(request: Request) -> SessionGates:
    return request.app.state.session_gates


def _result_to_out(result: ConversionResult) -> ConversionOut:
    return ConversionOut(
        ok=result.ok,
        from_currency=result.from_currency,
        to_currency=result.to_currency,
        amount=float(result.amount) if result.amount is not None else None,
        rate=float(result.rate) if result.rate is not None else None,
        display_amount=result.display_amount,
        display_rate=result.display_rate,
        failure=result.failure,
        message=result.message,
    )


@router.post("/convert", response_model=ConversionOut)
async def convert(
    payload: ConversionRequest,
    converter: Converter = Depends(get_converter),
    session_gates: SessionGates = Depends(get_session_gates),
) -> ConversionOut:
    if payload.swap:
        payload = payload.swapped()
    if payload.session_id is None:
        return _result_to_out(await converter.convert(payload))

    gate = session_gates.for_session(payload.session_id)
    result = await gate.run(converter.convert(payload))
    if result is None:
        return ConversionOut(
            ok=False,
            from_currency=payload.from_currency,
            to_currency=payload.to_currency,
            superseded=True,
        )
    return _result_to_out(result)


@router.get("/rates/{base}", response_model=RatesOut)
async def get_rates(
    base: str,
    rate_store: RateStore = Depends(get_rate_store),
) -> RatesOut:
    code = base.strip().upper()
    rates = await rate_store.get_rates(code)
    if rates is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"rates unavailable for {code}",
        )
    return RatesOut(base=code, rates=rates)


@router.get("/currencies", response_model=CurrenciesOut)
async def list_currencies() -> CurrenciesOut:
    settings = get_settings()
    codes = set(supported_currencies())
    codes.update({settings.default_from_currency, settings.default_to_currency})
    return CurrenciesOut(
        currencies=sorted(codes),
        default_from_currency=settings.default_from_currency,
        default_to_currency=settings.default_to_currency,
    )


@router.get("/health", response_model=HealthOut)
async def health(cache_client: CacheClient = Depends(get_cache_client)) -> HealthOut:
    return HealthOut(status="ok", cache=cache_client.backend)
