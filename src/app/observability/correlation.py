"""Gerenciamento de correlation_id para rastreamento de requisições.

O correlation_id é injetado em todos os logs da requisição (via
CorrelationIdFilter). Usa ContextVar para ser async-safe.

Origem do valor, em ordem:
1. Header X-Correlation-ID enviado pelo chamador
2. Trace id do header X-Cloud-Trace-Context (Cloud Run / load balancer)
3. UUID v4 novo

Uso:
    from app.observability import correlation_id_from_headers, set_correlation_id

    token = set_correlation_id(correlation_id_from_headers(request.headers))
    try:
        # processar request
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

CORRELATION_HEADER = "x-correlation-id"
CLOUD_TRACE_HEADER = "x-cloud-trace-context"

# ContextVar para correlation_id (async-safe)
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (vazio se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or str(uuid.uuid4())
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def correlation_id_from_headers(headers: Mapping[str, str]) -> str | None:
    """Extrai correlation_id dos headers, se houver.

    X-Cloud-Trace-Context tem o formato ``TRACE_ID/SPAN_ID;o=OPTIONS``.
    """
    explicit = (headers.get(CORRELATION_HEADER) or "").strip()
    if explicit:
        return explicit

    trace = (headers.get(CLOUD_TRACE_HEADER) or "").strip()
    if trace:
        trace_id = trace.split("/", 1)[0].split(";", 1)[0]
        if trace_id:
            return trace_id
    return None
