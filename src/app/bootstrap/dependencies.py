"""Factories de stores e serviços baseadas em configuração de ambiente.

Este módulo conecta implementações concretas (app/infra, api/connectors)
aos contratos consumidos pelos use cases.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import (
    create_async_redis_client,
    create_firestore_client,
    create_slack_client,
)
from app.infra.stores import (
    FirestoreCredentialStore,
    MemoryCredentialStore,
    RedisCredentialStore,
)
from app.services import ReconciliationService, TokenService
from app.use_cases.relay_webhook import RelayWebhookUseCase
from app.use_cases.slash_command import SlashCommandUseCase
from config.settings import (
    get_base_settings,
    get_credential_store_settings,
    get_firestore_settings,
    get_slack_settings,
)

if TYPE_CHECKING:
    from app.protocols.credential_store import CredentialStoreProtocol

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Credential Store Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_credential_store() -> CredentialStoreProtocol:
    """Cria store de credenciais conforme CREDENTIAL_STORE_BACKEND."""
    settings = get_credential_store_settings()
    backend = settings.backend

    if backend == "redis":
        store: CredentialStoreProtocol = RedisCredentialStore(
            create_async_redis_client(), key_prefix=settings.key_prefix
        )
    elif backend == "firestore":
        store = FirestoreCredentialStore(
            create_firestore_client(),
            collection_name=get_firestore_settings().collection_credentials,
        )
    elif backend == "memory":
        environment = get_base_settings().environment
        if environment != "development":
            logger.warning(
                "memory_credential_store_in_non_dev",
                extra={"backend": "memory", "environment": environment},
            )
        store = MemoryCredentialStore()
    else:
        msg = f"CREDENTIAL_STORE_BACKEND inválido: {backend}"
        raise ValueError(msg)

    logger.info("credential_store_created", extra={"backend": backend})
    return store


# ──────────────────────────────────────────────────────────────────────────────
# Services / Use Cases
# ──────────────────────────────────────────────────────────────────────────────


def create_token_service(store: CredentialStoreProtocol) -> TokenService:
    """Cria TokenService sobre o store informado."""
    return TokenService(store)


def create_relay_webhook_use_case(token_service: TokenService) -> RelayWebhookUseCase:
    """Cria o use case de relay de webhooks."""
    return RelayWebhookUseCase(
        token_service=token_service,
        directory=create_slack_client(),
    )


def create_slash_command_use_case(token_service: TokenService) -> SlashCommandUseCase:
    """Cria o use case de slash commands."""
    return SlashCommandUseCase(
        token_service=token_service,
        directory=create_slack_client(),
        custom_domain_name=get_slack_settings().custom_domain_name,
    )


def create_reconciliation_service(store: CredentialStoreProtocol) -> ReconciliationService:
    """Cria o serviço de reconciliação com o canal de operações configurado."""
    return ReconciliationService(
        store,
        create_slack_client(),
        get_slack_settings().ops_channel_name,
    )
