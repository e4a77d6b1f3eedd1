"""
Módulo de configuração do sistema.
Exporta as configurações principais para uso em todo o projeto.
"""

from config.settings import Settings, get_settings
from config.logging_config import setup_logging
from config.pipeline import PipelineConfig

__all__ = [
    "Settings",
    "get_settings",
    "PipelineConfig",
    "setup_logging",
]
