"""Observabilidade — logs estruturados, correlation_id, métricas.

Re-exporta funções de correlation_id e métricas para uso em toda a aplicação.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_relay_outcome
"""

from app.observability.correlation import (
    correlation_id_from_headers,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_latency,
    record_reconciliation,
    record_relay_outcome,
    record_slash_command,
)

__all__ = [
    "correlation_id_from_headers",
    "get_correlation_id",
    "record_latency",
    "record_reconciliation",
    "record_relay_outcome",
    "record_slash_command",
    "reset_correlation_id",
    "set_correlation_id",
]
