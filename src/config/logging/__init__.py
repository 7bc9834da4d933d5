"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger, mask_token

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="webhook_relay")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("token_verified", extra={"channel_name": "general"})

Campos obrigatórios em todo log:
- correlation_id
- service
- severity
- logger
- message
- timestamp

Tokens de webhook são credenciais: o filter mascara os campos token,
given_token e saved_token de `extra`; em outros contextos use mask_token.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import CorrelationIdFilter, mask_token
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    # Filters
    "CorrelationIdFilter",
    # Configuração principal
    "configure_logging",
    # Formatters
    "create_json_formatter",
    "get_logger",
    "mask_token",
]
