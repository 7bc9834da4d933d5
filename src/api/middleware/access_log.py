"""Access log e headers comuns a todas as respostas.

- Define correlation_id do request (header ou UUID novo)
- Loga método, path (token mascarado), status e latência
- Aplica ``cache-control: no-store, no-cache``: URLs de relay carregam token
"""

from __future__ import annotations

import logging
import re
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.observability import (
    correlation_id_from_headers,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CACHE_CONTROL_VALUE = "no-store, no-cache"
MASKED_TOKEN = "****"

_RELAY_PATH = re.compile(r"^/p/(?P<channel>[^/]+)/[^/]+(?P<slash>/?)$")


def mask_relay_path(path: str) -> str:
    """Substitui o segmento de token de ``/p/<canal>/<token>/`` por ``****``."""
    return _RELAY_PATH.sub(
        lambda m: f"/p/{m.group('channel')}/{MASKED_TOKEN}{m.group('slash')}", path
    )


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Loga cada request e injeta correlation_id/cache-control."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        token = set_correlation_id(correlation_id_from_headers(request.headers))
        started_at = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["cache-control"] = CACHE_CONTROL_VALUE
            response.headers.setdefault("x-correlation-id", get_correlation_id())
            logger.info(
                "http_request_completed",
                extra={
                    "method": request.method,
                    "path": mask_relay_path(request.url.path),
                    "status_code": response.status_code,
                    "latency_ms": round((time.perf_counter() - started_at) * 1000, 2),
                    "user_agent": request.headers.get("user-agent", ""),
                },
            )
            return response
        finally:
            reset_correlation_id(token)
