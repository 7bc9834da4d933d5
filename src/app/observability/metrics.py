"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e agregadas depois
por log-based metrics (Cloud Logging) ou BigQuery.

Métricas suportadas:
- Latência: histogram de tempos de execução por componente/operação
- Relay: counter de webhooks por resultado (ok, timeout, rejected, ...)
- Slash command: counter por comando e status do resultado
- Reconciliação: gauges de eventos detectados por execução

Uso:
    from app.observability.metrics import record_latency, record_relay_outcome

    start = time.perf_counter()
    # ... operação ...
    latency_ms = (time.perf_counter() - start) * 1000
    record_latency("relay", "post_message", latency_ms)
    record_relay_outcome("ok", "general")
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "relay", "slash_command")
        operation: Nome da operação (ex: "post_message", "/relay-show")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_relay_outcome(
    outcome: str,
    channel_name: str,
    status_code: int | None = None,
) -> None:
    """Registra resultado de um webhook recebido.

    Args:
        outcome: not_found, unmatch, invalid_body, ok, timeout,
            server_error, rejected ou unexpected_status
        channel_name: Canal do path (nunca o token)
        status_code: Status HTTP devolvido ao chamador
    """
    logger.info(
        "metric_relay_outcome",
        extra={
            "metric_type": "relay_outcome",
            "component": "relay",
            "outcome": outcome,
            "channel_name": channel_name,
            "status_code": status_code,
        },
    )


def record_slash_command(command: str, status: str) -> None:
    """Registra execução de slash command com o status do resultado."""
    logger.info(
        "metric_slash_command",
        extra={
            "metric_type": "slash_command",
            "component": "slash_command",
            "command": command,
            "status": status,
        },
    )


def record_reconciliation(counts: dict[str, int]) -> None:
    """Registra contagens de uma execução de reconciliação.

    Args:
        counts: Saída de ReconciliationReport.to_dict()
    """
    logger.info(
        "metric_reconciliation",
        extra={
            "metric_type": "reconciliation",
            "component": "reconciliation",
            **counts,
        },
    )
