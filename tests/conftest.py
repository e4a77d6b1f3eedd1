"""
Configurações e fixtures compartilhadas para pytest.
"""

import json
import os
from pathlib import Path

import pytest
import structlog

from config.pipeline import PipelineConfig
from config.settings import Settings, get_settings
from cambio.core.models import PriceElement, PriceMatch
from cambio.core.types import RenderMode
from cambio.document.live_document import LiveDocument
from cambio.rates.provider import StaticRateProvider
from tests.fixtures.html_samples import PRODUCT_PAGE


# ISOLAMENTO DE AMBIENTE

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove variáveis CAMBIO_* e reseta singletons entre testes."""
    for key in list(os.environ):
        if key.startswith("CAMBIO_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    # A CLI reconfigura o structlog apontando para streams temporários
    structlog.reset_defaults()


# FIXTURES DE CONFIGURAÇÃO

@pytest.fixture
def test_settings() -> Settings:
    """Settings com janelas curtas para testes com timers reais."""
    return Settings(env="testing", throttle_ms=50, badge_fade_ms=50)


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    """Base EUR, alvos EUR e GBP, modo substituição."""
    return PipelineConfig(
        enabled=True,
        base_currency="EUR",
        target_currencies=["EUR", "GBP"],
        mode=RenderMode.REPLACE,
        locale="en_US",
    )


# FIXTURES DE TAXAS

@pytest.fixture
def rates() -> dict[str, float]:
    """Taxas de referência com base EUR."""
    return {"USD": 1.10, "GBP": 0.85, "EUR": 1.00}


@pytest.fixture
def rate_provider(rates) -> StaticRateProvider:
    """Provider estático com base EUR."""
    return StaticRateProvider(rates, base="EUR")


@pytest.fixture
def rates_file(tmp_path, rates) -> Path:
    """Tabela de taxas em JSON."""
    path = tmp_path / "rates.json"
    path.write_text(json.dumps({"base": "EUR", "rates": rates}), encoding="utf-8")
    return path


# FIXTURES DE DOCUMENTO

@pytest.fixture
def product_document() -> LiveDocument:
    """Página de produto com $19.99 e 5€."""
    return LiveDocument(PRODUCT_PAGE)


@pytest.fixture
def product_file(tmp_path) -> Path:
    """Página de produto gravada em disco."""
    path = tmp_path / "pagina.html"
    path.write_text(PRODUCT_PAGE, encoding="utf-8")
    return path


@pytest.fixture
def usd_match() -> PriceMatch:
    """Match: $19.99."""
    return PriceMatch(raw="$19.99", amount=19.99, currency_code="USD", start=0, length=6)


@pytest.fixture
def price_element(product_document, usd_match) -> PriceElement:
    """Elemento detectado: <p class="price">$19.99</p>."""
    return PriceElement(
        element=product_document.select_one("p.price"),
        matches=[usd_match],
        original_text="$19.99",
    )
