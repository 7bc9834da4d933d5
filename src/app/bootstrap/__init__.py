"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_relay_webhook_use_case

    # Na inicialização do serviço
    initialize_app()

    # Obter use cases
    relay = get_relay_webhook_use_case()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_credential_store_settings,
    get_firestore_settings,
    get_slack_settings,
)

if TYPE_CHECKING:
    from app.protocols.credential_store import CredentialStoreProtocol
    from app.services import TokenService
    from app.use_cases.relay_webhook import RelayWebhookUseCase
    from app.use_cases.slash_command import SlashCommandUseCase

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez no início do serviço (HTTP ou job).
    """
    settings = get_base_settings()
    configure_logging(
        level=settings.log_level,
        service_name=settings.service_name,
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Agrega erros de validação de todas as settings ativas."""
    base = get_base_settings()
    store_settings = get_credential_store_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"credential_store: {error}" for error in store_settings.validate(base))
    errors.extend(f"slack: {error}" for error in get_slack_settings().validate())

    if store_settings.backend == "firestore":
        firestore_errors = get_firestore_settings().validate(base.gcp_project)
        errors.extend(f"firestore: {error}" for error in firestore_errors)

    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: Configuração inválida em ambiente estrito.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_credential_store() -> CredentialStoreProtocol:
    """Obtém store de credenciais (singleton)."""
    from app.bootstrap.dependencies import create_credential_store
    return create_credential_store()


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Obtém TokenService sobre o store configurado (singleton)."""
    from app.bootstrap.dependencies import create_token_service
    return create_token_service(get_credential_store())


@lru_cache(maxsize=1)
def get_relay_webhook_use_case() -> RelayWebhookUseCase:
    """Obtém use case de relay (singleton)."""
    from app.bootstrap.dependencies import create_relay_webhook_use_case
    return create_relay_webhook_use_case(get_token_service())


@lru_cache(maxsize=1)
def get_slash_command_use_case() -> SlashCommandUseCase:
    """Obtém use case de slash commands (singleton)."""
    from app.bootstrap.dependencies import create_slash_command_use_case
    return create_slash_command_use_case(get_token_service())
