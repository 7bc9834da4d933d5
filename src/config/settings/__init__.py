"""Agregador de settings do webhook_relay.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    CredentialStoreBackend,
    CredentialStoreSettings,
    Environment,
    get_base_settings,
    get_credential_store_settings,
)

# Infrastructure settings
from config.settings.infra import (
    FirestoreSettings,
    get_firestore_settings,
)

# Slack
from config.settings.slack import (
    SLACK_API_BASE_URL,
    SlackSettings,
    get_slack_settings,
)

__all__ = [
    # Constants
    "SLACK_API_BASE_URL",
    # Base
    "BaseSettings",
    "CredentialStoreBackend",
    "CredentialStoreSettings",
    "Environment",
    # Infrastructure
    "FirestoreSettings",
    # Slack
    "SlackSettings",
    "get_base_settings",
    "get_credential_store_settings",
    "get_firestore_settings",
    "get_slack_settings",
]
