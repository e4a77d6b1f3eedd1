"""
Fontes de taxas de câmbio.
Define o contrato assíncrono das fontes, a conversão via moeda base
e um provider estático (memória ou JSON) usado pela CLI e pelos testes.
"""

from pathlib import Path
from typing import Mapping, Optional, Protocol, Union, runtime_checkable

from pydantic import BaseModel, Field, ValidationError, field_validator

from config.logging_config import LoggerMixin
from cambio.core.exceptions import RateProviderError, UnknownCurrencyError
from cambio.core.types import CurrencyCode


@runtime_checkable
class RateProvider(Protocol):
    """Contrato de uma fonte de taxas (taxa = unidades por 1 unidade da base)."""

    async def get_rates(self, base: str) -> dict[str, float]:
        ...

    async def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        ...


# FUNÇÕES PURAS

def convert_via_base(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Mapping[str, float],
) -> float:
    """
    Converte passando pela moeda base da tabela.

    Fórmula: amount / rates[from] * rates[to]

    Raises:
        UnknownCurrencyError: Moeda ausente da tabela
    """
    for code in (from_currency, to_currency):
        if not rates.get(code):
            raise UnknownCurrencyError(code)

    if from_currency == to_currency:
        return amount

    return amount / rates[from_currency] * rates[to_currency]


def rebase_rates(
    rates: Mapping[str, float],
    from_base: str,
    to_base: str,
) -> dict[str, float]:
    """
    Reexpressa uma tabela de taxas em outra moeda base.

    A nova base fica com taxa 1 e a antiga com 1 / rates[to_base].

    Raises:
        UnknownCurrencyError: Nova base ausente da tabela
    """
    if from_base == to_base:
        return dict(rates)

    conversion_rate = rates.get(to_base)
    if not conversion_rate:
        raise UnknownCurrencyError(to_base)

    converted = {code: rate / conversion_rate for code, rate in rates.items()}
    converted[from_base] = 1 / conversion_rate
    converted[to_base] = 1.0
    return converted


# PROVIDER ESTÁTICO

class RateTable(BaseModel):
    """Tabela de taxas serializada: {"base": "EUR", "rates": {"USD": 1.1}}."""

    base: CurrencyCode = "EUR"
    rates: dict[CurrencyCode, float] = Field(default_factory=dict)

    @field_validator("rates", mode="after")
    @classmethod
    def positive_rates(cls, v: dict[str, float]) -> dict[str, float]:
        """Taxas precisam ser positivas."""
        invalid = [code for code, rate in v.items() if rate <= 0]
        if invalid:
            raise ValueError(f"Taxas não positivas: {', '.join(invalid)}")
        return v


class StaticRateProvider(LoggerMixin):
    """
    Provider em memória.
    A moeda base está sempre presente com taxa 1.
    """

    name = "static"

    def __init__(self, rates: Mapping[str, float], base: str = "EUR"):
        """
        Inicializa o provider.

        Args:
            rates: Taxas por moeda, relativas a base
            base: Moeda base da tabela
        """
        try:
            table = RateTable(base=base, rates=dict(rates))
        except ValidationError as e:
            raise RateProviderError(
                "Tabela de taxas inválida",
                provider=self.name,
                base_currency=base,
                cause=e,
            )

        self.base = table.base
        self._rates = dict(table.rates)
        self._rates[self.base] = 1.0

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "StaticRateProvider":
        """
        Carrega tabela de um arquivo JSON.

        Aceita {"base": ..., "rates": {...}}; sem "base", assume EUR.

        Raises:
            RateProviderError: Arquivo ausente ou conteúdo inválido
        """
        path = Path(path)
        try:
            table = RateTable.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise RateProviderError(
                f"Não foi possível carregar taxas de {path}",
                provider=cls.name,
                cause=e,
            )

        provider = cls(table.rates, base=table.base)
        provider.logger.info(
            "Taxas carregadas",
            path=str(path),
            base=provider.base,
            currencies=len(provider._rates),
        )
        return provider

    @property
    def currencies(self) -> list[str]:
        return sorted(self._rates)

    async def get_rates(self, base: Optional[str] = None) -> dict[str, float]:
        """
        Retorna a tabela na base pedida.

        Raises:
            RateProviderError: Base ausente da tabela
        """
        base = (base or self.base).upper()
        if base == self.base:
            return dict(self._rates)

        try:
            return rebase_rates(self._rates, self.base, base)
        except UnknownCurrencyError as e:
            raise RateProviderError(
                f"Base não suportada: {base}",
                provider=self.name,
                base_currency=base,
                cause=e,
            )

    async def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Converte um valor usando a tabela própria."""
        return convert_via_base(amount, from_currency, to_currency, self._rates)
