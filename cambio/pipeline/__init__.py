"""
Módulo de pipeline: liga detecção, taxas, formatação e renderização.
"""

from cambio.pipeline.pipeline import PriceConversionPipeline

__all__ = [
    "PriceConversionPipeline",
]
