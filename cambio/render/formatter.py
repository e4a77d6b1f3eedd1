"""
Formatação monetária localizada (Babel).
"""

from functools import lru_cache
from typing import Optional

from babel import Locale, UnknownLocaleError
from babel.numbers import format_currency, is_currency

from config.logging_config import LoggerMixin
from config.settings import get_settings


@lru_cache(maxsize=64)
def _parse_locale(locale_id: str) -> Locale:
    # Aceita tanto "pt-BR" quanto "pt_BR"
    return Locale.parse(locale_id.replace("-", "_"))


class CurrencyFormatter(LoggerMixin):
    """
    Formata valores com símbolo e separadores do locale.
    Sempre duas casas decimais; nunca lança exceção.
    """

    def __init__(self, default_locale: Optional[str] = None):
        """
        Inicializa o formatter.

        Args:
            default_locale: Locale padrão (None = settings)
        """
        self.default_locale = default_locale or get_settings().locale

    def format(
        self,
        amount: float,
        currency_code: str,
        locale: Optional[str] = None,
    ) -> str:
        """
        Formata um valor monetário.

        Exemplos (en_US):
            format(18.17, "EUR") -> "€18.17"
            format(4.25, "GBP")  -> "£4.25"

        Args:
            amount: Valor numérico
            currency_code: Código ISO 4217
            locale: Locale desta chamada (None = padrão)

        Returns:
            Texto formatado; "{valor:.2f} {código}" se moeda ou locale
            não forem reconhecidos
        """
        locale_id = locale or self.default_locale

        if not is_currency(currency_code):
            self.logger.warning("Código de moeda inválido", currency=currency_code)
            return self.fallback(amount, currency_code)

        try:
            return format_currency(
                amount,
                currency_code,
                locale=_parse_locale(locale_id),
                currency_digits=False,
            )
        except (UnknownLocaleError, ValueError) as e:
            self.logger.warning(
                "Locale não reconhecido",
                locale=locale_id,
                currency=currency_code,
                error=str(e),
            )
            return self.fallback(amount, currency_code)

    @staticmethod
    def fallback(amount: float, currency_code: str) -> str:
        """Formato neutro usado quando o Babel não reconhece a entrada."""
        return f"{amount:.2f} {currency_code}"
