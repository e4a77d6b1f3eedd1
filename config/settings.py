"""
Configurações globais do sistema usando Pydantic Settings.
Carrega variáveis de ambiente (prefixo CAMBIO_) e define valores padrão.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cambio.core.constants import BADGE_FADE_MS, THROTTLE_DELAY_MS


class Settings(BaseSettings):
    """Configurações principais do sistema."""

    model_config = SettingsConfigDict(
        env_prefix="CAMBIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ambiente
    env: Literal["development", "production", "testing"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_path: Optional[Path] = None

    # Conversão
    enabled: bool = True
    base_currency: str = Field(default="EUR", min_length=3, max_length=3)
    target_currencies: list[str] = Field(default_factory=lambda: ["EUR", "GBP"])
    render_mode: Literal["replace", "badge"] = "replace"
    locale: str = "en_US"

    # Tempos (milissegundos)
    throttle_ms: int = Field(default=THROTTLE_DELAY_MS, ge=50, le=5000)
    badge_fade_ms: int = Field(default=BADGE_FADE_MS, ge=0, le=2000)

    # Taxas estáticas (JSON) para a CLI
    rates_path: Optional[Path] = None

    @field_validator("base_currency", mode="after")
    @classmethod
    def upper_base_currency(cls, v: str) -> str:
        """Códigos ISO sempre em maiúsculas."""
        return v.strip().upper()

    @field_validator("target_currencies", mode="after")
    @classmethod
    def upper_target_currencies(cls, v: list[str]) -> list[str]:
        """Normaliza e remove duplicatas mantendo a ordem."""
        seen: list[str] = []
        for code in v:
            code = code.strip().upper()
            if code and code not in seen:
                seen.append(code)
        return seen

    @property
    def throttle_seconds(self) -> float:
        """Janela de throttle do watcher em segundos."""
        return self.throttle_ms / 1000

    @property
    def badge_fade_seconds(self) -> float:
        """Atraso de remoção do badge em segundos."""
        return self.badge_fade_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """
    Retorna instância singleton das configurações.
    Usa cache para evitar recarregar .env múltiplas vezes.
    """
    return Settings()
