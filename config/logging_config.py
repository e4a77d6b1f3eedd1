"""
Logging estruturado do cambio (structlog).
Console colorido em desenvolvimento, JSON em produção; sempre em stderr,
deixando stdout para o HTML convertido.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

import structlog
from structlog.typing import Processor

from cambio.core.exceptions import ConfigurationError


LOG_FILE_NAME = "cambio.log"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def resolve_level(level: str) -> int:
    """
    Converte o nome do nível para o valor numérico do logging.

    Raises:
        ConfigurationError: Nível desconhecido
    """
    name = level.strip().upper()
    if name not in LOG_LEVELS:
        raise ConfigurationError(
            f"Nível de log inválido: {level}",
            field="log_level",
            value=level,
        )
    return getattr(logging, name)


def _build_processors(json_format: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_format:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    return processors


def _attach_file_handler(log_path: Path, level: int) -> Path:
    """Anexa o arquivo de log ao root logger uma única vez por caminho."""
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = (log_path / LOG_FILE_NAME).resolve()

    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_file:
            handler.setLevel(level)
            return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    root.addHandler(file_handler)
    return log_file


def setup_logging(
    level: str = "INFO",
    log_path: Optional[Path] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> structlog.BoundLogger:
    """
    Configura structlog e o logging padrão.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR)
        log_path: Diretório do arquivo cambio.log (None = sem arquivo)
        json_format: Se True, usa formato JSON (produção)
        stream: Destino dos logs (None = stderr atual)

    Returns:
        Logger raiz do cambio

    Raises:
        ConfigurationError: Nível desconhecido
    """
    numeric_level = resolve_level(level)
    stream = stream or sys.stderr

    structlog.configure(
        processors=_build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=stream, level=numeric_level)

    logger = get_logger()
    if log_path:
        log_file = _attach_file_handler(Path(log_path), numeric_level)
        logger.debug("Arquivo de log ativo", path=str(log_file))
    return logger


def get_logger(name: str = "cambio", **context) -> structlog.BoundLogger:
    """Logger com o componente e o contexto extra já vinculados."""
    return structlog.get_logger(name).bind(component=name, **context)


class LoggerMixin:
    """Mixin que dá a cada engine um logger com o nome da classe."""

    @property
    def logger(self) -> structlog.BoundLogger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger

    def log_operation(self, operation: str, **kwargs) -> structlog.BoundLogger:
        """Logger com a operação em andamento vinculada."""
        return self.logger.bind(operation=operation, **kwargs)
