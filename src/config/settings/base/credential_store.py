"""Settings do armazenamento de credenciais de webhook.

Define o backend usado pelos stores de tokens por canal.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

CredentialStoreBackend = Literal["memory", "redis", "firestore"]

DEFAULT_KEY_PREFIX = "credential:"


@dataclass(frozen=True)
class CredentialStoreSettings:
    """Configurações do store de credenciais.

    Attributes:
        backend: Backend de persistência (memory|redis|firestore)
        key_prefix: Prefixo das chaves Redis (um hash por channel_name)
    """

    backend: CredentialStoreBackend = "memory"
    key_prefix: str = DEFAULT_KEY_PREFIX

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do store de credenciais.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []
        valid_backends = {"memory", "redis", "firestore"}

        if self.backend not in valid_backends:
            errors.append(f"CREDENTIAL_STORE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append(
                "CREDENTIAL_STORE_BACKEND=memory proibido em staging/production. "
                "Tokens seriam perdidos a cada restart."
            )

        if self.backend == "redis" and not base.redis_url:
            errors.append("CREDENTIAL_STORE_BACKEND=redis requer REDIS_URL configurado")

        if self.backend == "firestore" and not base.gcp_project:
            errors.append(
                "CREDENTIAL_STORE_BACKEND=firestore requer GCP_PROJECT configurado"
            )

        if not self.key_prefix:
            errors.append("CREDENTIAL_STORE_KEY_PREFIX não pode ser vazio")

        return errors


def _load_credential_store_from_env() -> CredentialStoreSettings:
    """Carrega CredentialStoreSettings de variáveis de ambiente."""
    backend_str = os.getenv("CREDENTIAL_STORE_BACKEND", "memory").lower()
    backend: CredentialStoreBackend = (
        backend_str if backend_str in ("memory", "redis", "firestore") else "memory"
    )
    return CredentialStoreSettings(
        backend=backend,
        key_prefix=os.getenv("CREDENTIAL_STORE_KEY_PREFIX", DEFAULT_KEY_PREFIX),
    )


@lru_cache(maxsize=1)
def get_credential_store_settings() -> CredentialStoreSettings:
    """Retorna instância cacheada de CredentialStoreSettings."""
    return _load_credential_store_from_env()
