"""
Módulo de apresentação: renderização, estilos injetados e formatação monetária.
"""

from cambio.render.formatter import CurrencyFormatter
from cambio.render.renderer import PresentationEngine
from cambio.render.styles import ensure_styles_injected

__all__ = [
    "CurrencyFormatter",
    "PresentationEngine",
    "ensure_styles_injected",
]
