"""
Cambio: detecção e conversão de preços em documentos HTML vivos.
"""

__version__ = "0.1.0"
