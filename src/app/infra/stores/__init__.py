"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - redis_credential_store: Store de credenciais usando Redis
    - firestore_credential_store: Store de credenciais usando Firestore
    - memory_credential_store: Store em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_credential_store import FirestoreCredentialStore
from app.infra.stores.memory_credential_store import MemoryCredentialStore
from app.infra.stores.redis_credential_store import RedisCredentialStore

__all__ = [
    # Firestore
    "FirestoreCredentialStore",
    # Memory (dev/test)
    "MemoryCredentialStore",
    # Redis
    "RedisCredentialStore",
]
