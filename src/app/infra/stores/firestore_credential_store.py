"""Firestore Credential Store — credenciais de webhook em Firestore.

Um documento por (channel_name, version), com id "<channel_name>#<version>".
create() falha se o documento existir, o que dá a escrita condicional.
O delete relê o documento, confere o token e remove com precondição
de last_update_time, então um registro alterado no meio do caminho
não é apagado.

O SDK síncrono roda em asyncio.to_thread para não bloquear o event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud.firestore_v1.base_query import FieldFilter

from app.domain.credential import CredentialRecord
from app.protocols.credential_store import (
    CorruptRecordError,
    CredentialConflictError,
    CredentialNotFoundError,
    CredentialStoreError,
    CredentialStoreProtocol,
)

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

CREDENTIALS_COLLECTION = "webhook_credentials"


def document_id(channel_name: str, version: int) -> str:
    """Id determinístico do documento."""
    return f"{channel_name}#{version}"


class FirestoreCredentialStore(CredentialStoreProtocol):
    """Store de credenciais usando Firestore.

    Args:
        firestore_client: Cliente Firestore
        collection_name: Nome da collection (default: webhook_credentials)
    """

    def __init__(
        self,
        firestore_client: FirestoreClient,
        collection_name: str = CREDENTIALS_COLLECTION,
    ) -> None:
        self._db = firestore_client
        self._collection = collection_name

    def _ref(self, channel_name: str, version: int) -> Any:
        return self._db.collection(self._collection).document(
            document_id(channel_name, version)
        )

    # ──────────────────────────────────────────────────────────────
    # Implementações síncronas (executadas em thread)
    # ──────────────────────────────────────────────────────────────

    def _save_sync(self, record: CredentialRecord) -> None:
        try:
            self._ref(record.channel_name, record.version).create(record.to_dict())
        except gcp_exceptions.AlreadyExists as exc:
            raise CredentialConflictError(record.channel_name, record.version) from exc
        except gcp_exceptions.GoogleAPICallError as exc:
            raise CredentialStoreError("Falha ao salvar credencial no Firestore") from exc

    def _query_sync(self, channel_name: str) -> list[CredentialRecord]:
        query = self._db.collection(self._collection).where(
            filter=FieldFilter("channel_name", "==", channel_name)
        )
        try:
            return [_decode(doc.to_dict()) for doc in query.stream()]
        except gcp_exceptions.GoogleAPICallError as exc:
            raise CredentialStoreError(
                "Falha ao consultar credenciais no Firestore"
            ) from exc

    def _delete_sync(self, record: CredentialRecord) -> None:
        ref = self._ref(record.channel_name, record.version)
        try:
            snapshot = ref.get()
            if not snapshot.exists or (snapshot.to_dict() or {}).get("token") != record.token:
                raise CredentialNotFoundError(record.channel_name, record.version)
            ref.delete(
                option=self._db.write_option(last_update_time=snapshot.update_time)
            )
        except (gcp_exceptions.NotFound, gcp_exceptions.FailedPrecondition) as exc:
            raise CredentialNotFoundError(record.channel_name, record.version) from exc
        except gcp_exceptions.GoogleAPICallError as exc:
            raise CredentialStoreError("Falha ao remover credencial no Firestore") from exc

    def _scan_sync(self) -> list[CredentialRecord]:
        try:
            return [
                _decode(doc.to_dict())
                for doc in self._db.collection(self._collection).stream()
            ]
        except gcp_exceptions.GoogleAPICallError as exc:
            raise CredentialStoreError("Falha ao varrer credenciais no Firestore") from exc

    # ──────────────────────────────────────────────────────────────
    # Async API (CredentialStoreProtocol)
    # ──────────────────────────────────────────────────────────────

    async def save(self, record: CredentialRecord) -> None:
        """Cria documento do registro (falha se já existir)."""
        await asyncio.to_thread(self._save_sync, record)
        logger.debug(
            "credential_saved",
            extra={"channel_name": record.channel_name, "version": record.version},
        )

    async def query_by_name(self, channel_name: str) -> list[CredentialRecord]:
        """Retorna registros do canal."""
        return await asyncio.to_thread(self._query_sync, channel_name)

    async def delete(self, record: CredentialRecord) -> None:
        """Remove documento se o token ainda for o mesmo."""
        await asyncio.to_thread(self._delete_sync, record)
        logger.debug(
            "credential_deleted",
            extra={"channel_name": record.channel_name, "version": record.version},
        )

    async def scan_all(self) -> list[CredentialRecord]:
        """Retorna todos os documentos da collection."""
        return await asyncio.to_thread(self._scan_sync)


def _decode(data: dict[str, Any] | None) -> CredentialRecord:
    try:
        return CredentialRecord.from_dict(data or {})
    except (KeyError, TypeError, ValueError) as exc:
        raise CorruptRecordError("Documento de credencial ilegível no Firestore") from exc
