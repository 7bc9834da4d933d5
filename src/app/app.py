"""Entrypoint da aplicação webhook_relay.

Este módulo é o ponto de entrada principal do serviço HTTP.
Resolve secrets, inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.middleware import AccessLogMiddleware
from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_async_redis_client, create_firestore_client
from app.infra.secrets import apply_secret_references
from config.logging import get_logger
from config.settings import get_base_settings, get_credential_store_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Secrets (gsm://) precisam estar no ambiente antes da primeira leitura de settings
apply_secret_references()
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Inicializa o cliente do backend de credenciais (readiness)

    Shutdown:
    - Fecha conexões gracefully
    """
    service_name = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service_name})
    validate_runtime_settings()
    app.state.redis_client = None
    app.state.firestore_client = None

    backend = get_credential_store_settings().backend
    if backend == "redis":
        try:
            app.state.redis_client = create_async_redis_client()
        except ValueError as exc:
            logger.warning("redis_client_not_ready", extra={"error_type": type(exc).__name__})
    elif backend == "firestore":
        try:
            app.state.firestore_client = create_firestore_client()
        except Exception as exc:
            logger.warning(
                "firestore_client_not_ready", extra={"error_type": type(exc).__name__}
            )

    yield

    logger.info("app_shutting_down", extra={"service": service_name})
    redis_client = getattr(app.state, "redis_client", None)
    if redis_client is not None:
        await redis_client.aclose()


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="webhook_relay",
        description="Relay de webhooks legados para canais do Slack",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    fastapi_app.add_middleware(AccessLogMiddleware)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": get_base_settings().service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    logger.info("Starting webhook_relay in development mode")
    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
        reload=True,
    )


if __name__ == "__main__":
    main()
