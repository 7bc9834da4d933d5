"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config.settings import (
    BaseSettings,
    CredentialStoreSettings,
    get_base_settings,
    get_credential_store_settings,
    get_firestore_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health")
async def health_check(
    settings: BaseSettings = Depends(get_base_settings),
) -> JSONResponse:
    """Liveness probe. HEALTH_CHECK_OK=0 força 503 (drenar instância)."""
    if not settings.health_check_ok:
        return JSONResponse(content={"message": "ng"}, status_code=503)
    return JSONResponse(
        content={
            "message": "ok",
            "service": settings.service_name,
            "timestamp": datetime.now(UTC).isoformat(),
        }
    )


@router.get("/ready")
async def readiness_check(
    request: Request,
    store_settings: CredentialStoreSettings = Depends(get_credential_store_settings),
) -> JSONResponse:
    """Readiness probe: verifica o backend do store de credenciais."""
    backend = store_settings.backend
    if backend == "redis":
        check = await _check_redis(getattr(request.app.state, "redis_client", None))
    elif backend == "firestore":
        check = await _check_firestore(getattr(request.app.state, "firestore_client", None))
    else:
        check = DependencyCheck(status="ok", latency_ms=0.0)

    ready = check.status == "ok"
    if not ready:
        logger.warning(
            "readiness_check_failed",
            extra={"backend": backend, "error": check.error},
        )
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {backend: check.as_dict()},
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_redis(redis_client: Any | None) -> DependencyCheck:
    if redis_client is None:
        return DependencyCheck(status="failed", error="not_configured")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(redis_client.ping(), timeout=2.0)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))


async def _check_firestore(firestore_client: Any | None) -> DependencyCheck:
    if firestore_client is None:
        return DependencyCheck(status="failed", error="not_configured")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(
            asyncio.to_thread(_probe_credentials_collection, firestore_client),
            timeout=3.0,
        )
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))


def _probe_credentials_collection(firestore_client: Any) -> None:
    collection = get_firestore_settings().collection_credentials
    list(firestore_client.collection(collection).limit(1).stream())
