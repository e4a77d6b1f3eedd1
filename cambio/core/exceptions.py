"""
Hierarquia de exceções do sistema.
Todas as exceções herdam de CambioError para facilitar tratamento.
"""

from typing import Any, Optional


class CambioError(Exception):
    """
    Exceção base do sistema.
    Todas as exceções customizadas herdam desta classe.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.cause:
            base += f" | Caused by: {self.cause}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Serializa exceção para dicionário."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


# EXCEÇÕES DE DETECÇÃO

class DetectionError(CambioError):
    """Erro genérico do motor de detecção."""
    pass


class DetectionInvariantError(DetectionError):
    """Violação de invariante na varredura (ex: nó de texto sem pai)."""

    def __init__(
        self,
        message: str = "Invariante de detecção violada",
        *,
        node_text: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if node_text:
            # Limita tamanho para não poluir logs
            details["node_text"] = node_text[:200]
        super().__init__(message, details=details, **kwargs)


# EXCEÇÕES DE RENDERIZAÇÃO

class RenderError(CambioError):
    """Erro ao renderizar conversões no documento."""

    def __init__(
        self,
        message: str,
        *,
        mode: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if mode:
            details["mode"] = mode
        super().__init__(message, details=details, **kwargs)
        self.mode = mode


# EXCEÇÕES DE TAXAS

class RateProviderError(CambioError):
    """Falha ao obter taxas de câmbio."""

    def __init__(
        self,
        message: str = "Nenhuma fonte de taxas disponível",
        *,
        provider: Optional[str] = None,
        base_currency: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if provider:
            details["provider"] = provider
        if base_currency:
            details["base_currency"] = base_currency
        super().__init__(message, details=details, **kwargs)
        self.provider = provider
        self.base_currency = base_currency


class UnknownCurrencyError(RateProviderError):
    """Moeda ausente do conjunto de taxas resolvido."""

    def __init__(
        self,
        currency: str,
        message: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["currency"] = currency
        super().__init__(
            message or f"Moeda não disponível: {currency}",
            details=details,
            **kwargs,
        )
        self.currency = currency


# EXCEÇÕES DE CONFIGURAÇÃO

class ConfigurationError(CambioError):
    """Erro de validação de configuração ou entrada."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = str(value)
        super().__init__(message, details=details, **kwargs)
