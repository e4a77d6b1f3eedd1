"""
Módulo de taxas: contrato das fontes, conversão via base e provider estático.
"""

from cambio.rates.provider import (
    RateProvider,
    RateTable,
    StaticRateProvider,
    convert_via_base,
    rebase_rates,
)

__all__ = [
    "RateProvider",
    "RateTable",
    "StaticRateProvider",
    "convert_via_base",
    "rebase_rates",
]
