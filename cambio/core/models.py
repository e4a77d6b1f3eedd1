"""
Modelos de dados do sistema.
Define matches de preço, elementos detectados e conversões.
"""

from dataclasses import dataclass, field
from typing import Optional

from bs4.element import Tag
from pydantic import BaseModel, Field, computed_field

from cambio.core.types import Amount, CurrencyCode


class PriceMatch(BaseModel):
    """
    Valor monetário reconhecido em um trecho de texto.
    Offsets servem apenas para resolver sobreposições dentro de uma chamada.
    """

    model_config = {"frozen": True}

    raw: str = Field(..., min_length=1, description="Trecho exato reconhecido")
    amount: Amount
    currency_code: CurrencyCode
    start: int = Field(..., ge=0)
    length: int = Field(..., gt=0)

    @computed_field
    @property
    def end(self) -> int:
        """Offset exclusivo do fim do match."""
        return self.start + self.length

    def overlaps(self, other: "PriceMatch") -> bool:
        """Indica se os dois trechos se sobrepõem."""
        return self.start < other.end and other.start < self.end


class ConvertedPrice(BaseModel):
    """Valor convertido e formatado, construído a cada renderização."""

    amount: float
    currency_code: CurrencyCode
    formatted: str = Field(..., description="Ex: €18.17")


@dataclass(eq=False)
class PriceElement:
    """
    Elemento do documento com preço detectado.
    Identidade pelo próprio elemento; nunca alterado após a criação.
    """

    element: Tag
    matches: list[PriceMatch] = field(default_factory=list)
    original_text: str = ""

    @property
    def first_match(self) -> Optional[PriceMatch]:
        """Primeiro match aceito (o único convertido)."""
        return self.matches[0] if self.matches else None

    @property
    def tag_name(self) -> str:
        """Nome da tag do elemento."""
        return self.element.name
