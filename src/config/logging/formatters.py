"""Formatter JSON no formato esperado pelo Cloud Logging.

O Cloud Run lê ``severity`` para classificar a entrada e ``timestamp``
para ordená-la; os demais campos vão para jsonPayload.
"""

from __future__ import annotations

import time

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado (nomes do LogRecord)
REQUIRED_LOG_FIELDS = frozenset(
    {
        "asctime",
        "levelname",
        "name",
        "message",
        "correlation_id",
        "service",
    }
)

FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "severity",
    "name": "logger",
}

# RFC 3339 em UTC; formatTime só acrescenta milissegundos sem datefmt
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
MSEC_FORMAT = "%s.%03dZ"


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos renomeados e horário em UTC.

    Exemplo de output:
        {
            "timestamp": "2026-02-02T10:30:00.123Z",
            "severity": "INFO",
            "logger": "app.services.token_service",
            "message": "token_generated",
            "correlation_id": "abc-123",
            "service": "webhook_relay",
            "channel_name": "general",
            "token": "3f9a****************************"
        }
    """
    format_string = " ".join(f"%({field})s" for field in sorted(REQUIRED_LOG_FIELDS))
    formatter = JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
    formatter.converter = time.gmtime
    formatter.default_time_format = DATE_FORMAT
    formatter.default_msec_format = MSEC_FORMAT
    return formatter
