"""Store de credenciais em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

from app.domain.credential import CredentialRecord
from app.protocols.credential_store import (
    CredentialConflictError,
    CredentialNotFoundError,
    CredentialStoreProtocol,
)


class MemoryCredentialStore(CredentialStoreProtocol):
    """Store de credenciais em memória com escrita e remoção condicionais."""

    def __init__(self, records: list[CredentialRecord] | None = None) -> None:
        self._store: dict[tuple[str, int], CredentialRecord] = {}
        for record in records or []:
            self._store[(record.channel_name, record.version)] = record

    async def save(self, record: CredentialRecord) -> None:
        """Salva registro se (channel_name, version) estiver livre."""
        key = (record.channel_name, record.version)
        if key in self._store:
            raise CredentialConflictError(record.channel_name, record.version)
        self._store[key] = record

    async def query_by_name(self, channel_name: str) -> list[CredentialRecord]:
        """Retorna registros do canal."""
        return [r for (name, _), r in self._store.items() if name == channel_name]

    async def delete(self, record: CredentialRecord) -> None:
        """Remove registro se o token armazenado ainda for o mesmo."""
        key = (record.channel_name, record.version)
        current = self._store.get(key)
        if current is None or current.token != record.token:
            raise CredentialNotFoundError(record.channel_name, record.version)
        del self._store[key]

    async def scan_all(self) -> list[CredentialRecord]:
        """Retorna todos os registros."""
        return list(self._store.values())
