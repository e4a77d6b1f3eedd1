"""
Módulo de detecção: parser de valores, watcher de mutações e motor de varredura.
"""

from cambio.detector.detector import PriceDetector
from cambio.detector.parser import AmountParser, parse_amount, resolve_overlaps
from cambio.detector.watcher import ContentChangeWatcher

__all__ = [
    "PriceDetector",
    "AmountParser",
    "ContentChangeWatcher",
    "parse_amount",
    "resolve_overlaps",
]
