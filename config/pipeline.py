"""
Configuração estática do pipeline de conversão.
Entregue uma única vez ao iniciar o pipeline; não há recarga a quente.
"""

from typing import Optional

from pydantic import BaseModel, Field

from cambio.core.types import CurrencyCode, RenderMode
from config.settings import Settings, get_settings


class PipelineConfig(BaseModel):
    """Parâmetros do pipeline: moeda base, moedas alvo e modo de exibição."""

    model_config = {"frozen": True}

    enabled: bool = True
    base_currency: CurrencyCode = "EUR"
    target_currencies: list[CurrencyCode] = Field(default_factory=lambda: ["EUR", "GBP"])
    mode: RenderMode = RenderMode.REPLACE
    locale: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PipelineConfig":
        """
        Monta a configuração a partir das Settings do ambiente.

        Args:
            settings: Settings explícitas (None = singleton)

        Returns:
            PipelineConfig imutável
        """
        settings = settings or get_settings()
        return cls(
            enabled=settings.enabled,
            base_currency=settings.base_currency,
            target_currencies=settings.target_currencies,
            mode=RenderMode(settings.render_mode),
            locale=settings.locale,
        )
