"""
Módulo core: modelos de dados, exceções, tipos e constantes.
"""

from cambio.core.models import (
    PriceMatch,
    PriceElement,
    ConvertedPrice,
)
from cambio.core.exceptions import (
    CambioError,
    DetectionError,
    DetectionInvariantError,
    RenderError,
    RateProviderError,
    UnknownCurrencyError,
    ConfigurationError,
)
from cambio.core.types import (
    RenderMode,
    DetectorState,
    MutationType,
    CurrencyCode,
)
from cambio.core.constants import (
    CURRENCY_SYMBOLS,
    REVERSE_CURRENCY_SYMBOLS,
    ISO_CODES,
)

__all__ = [
    # Models
    "PriceMatch",
    "PriceElement",
    "ConvertedPrice",
    # Exceptions
    "CambioError",
    "DetectionError",
    "DetectionInvariantError",
    "RenderError",
    "RateProviderError",
    "UnknownCurrencyError",
    "ConfigurationError",
    # Types
    "RenderMode",
    "DetectorState",
    "MutationType",
    "CurrencyCode",
    # Constants
    "CURRENCY_SYMBOLS",
    "REVERSE_CURRENCY_SYMBOLS",
    "ISO_CODES",
]
