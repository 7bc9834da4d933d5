"""Protocolos de domínio para Credential Store.

Contrato estreito sobre uma tabela chave-valor indexada por
(channel_name, version). Consumido pelo TokenService e pela reconciliação.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.credential import CredentialRecord


class CredentialStoreProtocol(ABC):
    """Contrato para persistência de credenciais de webhook.

    Invariantes exigidas dos adapters:
        - save é condicional: falha se (channel_name, version) já existir
        - delete é condicional: só remove se o token armazenado ainda for o mesmo
        - query_by_name não garante ordem (o consumidor ordena)
        - scan_all pagina internamente e devolve a tabela inteira
    """

    @abstractmethod
    async def save(self, record: CredentialRecord) -> None:
        """Insere registro.

        Raises:
            CredentialConflictError: (channel_name, version) já existe.
            CredentialStoreError: Falha do backend.
        """

    @abstractmethod
    async def query_by_name(self, channel_name: str) -> list[CredentialRecord]:
        """Retorna todos os registros de um channel_name (ordem não garantida)."""

    @abstractmethod
    async def delete(self, record: CredentialRecord) -> None:
        """Remove registro se (channel_name, version, token) ainda casarem.

        Raises:
            CredentialNotFoundError: Nenhum registro correspondente.
            CredentialStoreError: Falha do backend.
        """

    @abstractmethod
    async def scan_all(self) -> list[CredentialRecord]:
        """Retorna todos os registros armazenados."""


class CredentialStoreError(Exception):
    """Erro de persistência em CredentialStore."""


class CredentialConflictError(CredentialStoreError):
    """Escrita condicional colidiu com (channel_name, version) existente."""

    def __init__(self, channel_name: str, version: int) -> None:
        super().__init__(
            f"credential already exists: channel_name={channel_name}, version={version}"
        )
        self.channel_name = channel_name
        self.version = version


class CredentialNotFoundError(CredentialStoreError):
    """Delete condicional não encontrou registro com o token esperado."""

    def __init__(self, channel_name: str, version: int) -> None:
        super().__init__(
            f"credential not found: channel_name={channel_name}, version={version}"
        )
        self.channel_name = channel_name
        self.version = version


class CorruptRecordError(CredentialStoreError):
    """Registro armazenado com dados ilegíveis (ex: created_at inválido)."""
