from fxconverter.providers.base import RateFetchError, RateProvider, RateTable
from fxconverter.providers.http import HttpRateProvider

__all__ = ["HttpRateProvider", "RateFetchError", "RateProvider", "RateTable"]
