"""
Módulo de documento: árvore HTML observável e percurso de texto.
"""

from cambio.document.live_document import (
    BoundingBox,
    DocumentEvent,
    LiveDocument,
    MutationRecord,
    MutationSubscription,
    Viewport,
)
from cambio.document.walker import TextNodeWalker, is_excluded_element, is_text_node

__all__ = [
    "BoundingBox",
    "DocumentEvent",
    "LiveDocument",
    "MutationRecord",
    "MutationSubscription",
    "Viewport",
    "TextNodeWalker",
    "is_excluded_element",
    "is_text_node",
]
