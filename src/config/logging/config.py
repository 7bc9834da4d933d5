"""Logging JSON do relay (HTTP e job de reconciliação).

Cada linha em stderr é um objeto JSON com severity, logger, message,
correlation_id e service; o Cloud Logging agrupa as linhas de uma mesma
requisição (ou execução do job) pelo correlation_id.

Uso:
    from config.logging import configure_logging, get_logger

    # app/bootstrap: uma vez por processo
    configure_logging(level="INFO", correlation_id_getter=get_correlation_id)

    logger = get_logger(__name__)
    logger.info("token_generated", extra={"channel_name": "general", "token": token})
    # -> {"message": "token_generated", "token": "3f9a****...", ...}
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "webhook_relay"

# Clientes de terceiros que logam URLs (com token no path) ou ruído de conexão
QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "google.auth",
    "google.api_core",
    "urllib3",
)


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Instala o handler JSON no root logger, substituindo os existentes.

    Args:
        level: LOG_LEVEL do ambiente, sem distinção de caixa.
        service_name: Valor do campo ``service`` em cada linha.
        correlation_id_getter: Lê o correlation_id do contexto atual
            (ContextVar preenchido pelo middleware ou pelo job).
        stream: Destino das linhas; stderr por padrão.

    Returns:
        O handler instalado.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    # Mesmo em DEBUG: o path do relay carrega o token
    quiet_level = max(logging.WARNING, root.level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
    return handler


def get_logger(name: str) -> logging.Logger:
    """Logger do módulo; service/correlation_id vêm do handler.

    Exemplo:
        get_logger("app.jobs.reconcile_channels").info(
            "reconcile_completed", extra={"archived": 2, "renames": 1}
        )
    """
    return logging.getLogger(name)
