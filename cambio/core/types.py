"""
Tipos customizados e enumerações do sistema.
"""

from enum import Enum
from typing import Annotated

from pydantic import BeforeValidator, Field, StringConstraints


# ENUMERAÇÕES

class RenderMode(str, Enum):
    """Modos de exibição das conversões (mutuamente exclusivos)."""

    REPLACE = "replace"   # Substitui o texto do elemento
    BADGE = "badge"       # Destaque + badge flutuante no hover


class DetectorState(str, Enum):
    """Estado do motor de detecção."""

    IDLE = "idle"
    SCANNING = "scanning"


class MutationType(str, Enum):
    """Tipos de mutação emitidos pelo documento."""

    CHILD_LIST = "childList"
    CHARACTER_DATA = "characterData"
    ATTRIBUTES = "attributes"


# TIPOS ANOTADOS

def _normalize_code(value):
    """Remove espaços e passa para maiúsculas antes da validação."""
    if isinstance(value, str):
        return value.strip().upper()
    return value


# Código ISO 4217 (3 letras maiúsculas); aceita entrada em minúsculas
CurrencyCode = Annotated[
    str,
    BeforeValidator(_normalize_code),
    StringConstraints(pattern=r"^[A-Z]{3}$"),
]

# Valor monetário (nunca negativo)
Amount = Annotated[float, Field(ge=0)]
