"""Ciclo de vida dos tokens de webhook por canal.

Gera, verifica, rotaciona e revoga tokens. Sem estado próprio: cada
operação faz no máximo uma leitura e uma escrita no store injetado.

Resultados esperados (não encontrado, token errado, limite atingido)
voltam como variantes de dataclass. Exceções ficam para falhas de
dependência (store, fonte de entropia).
"""

from __future__ import annotations

import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from app.domain.credential import (
    MAX_TOKEN_COUNT,
    CredentialRecord,
    Entry,
    format_created_at,
    record_to_entry,
    sort_by_version,
)
from app.protocols.credential_store import (
    CorruptRecordError,
    CredentialNotFoundError,
)
from config.logging import mask_token

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.credential_store import CredentialStoreProtocol

logger = logging.getLogger(__name__)

TOKEN_BYTES = 16
# 1 tentativa + 3 retries em caso de colisão
MAX_GENERATION_ATTEMPTS = 4


class TokenGenerationError(Exception):
    """Fonte de entropia falhou ou colidiu em todas as tentativas."""


# --- Verify -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VerifyNotFound:
    status: Literal["not_found"] = "not_found"


@dataclass(frozen=True, slots=True)
class VerifyUnmatch:
    status: Literal["unmatch"] = "unmatch"


@dataclass(frozen=True, slots=True)
class VerifyMatched:
    channel_id: str
    channel_name: str
    status: Literal["matched"] = "matched"


VerifyResult = VerifyNotFound | VerifyUnmatch | VerifyMatched


# --- Generate / Regenerate --------------------------------------------------


@dataclass(frozen=True, slots=True)
class GenerateResult:
    token: str
    is_generated: bool

    @property
    def status(self) -> str:
        return "generated" if self.is_generated else "existing"


@dataclass(frozen=True, slots=True)
class RegenerateNoTokenFound:
    status: Literal["no_token_found"] = "no_token_found"


@dataclass(frozen=True, slots=True)
class RegenerateTooManyTokens:
    status: Literal["too_many_tokens"] = "too_many_tokens"


@dataclass(frozen=True, slots=True)
class RegenerateSucceeded:
    token: str
    status: Literal["succeeded"] = "succeeded"


RegenerateResult = RegenerateNoTokenFound | RegenerateTooManyTokens | RegenerateSucceeded


# --- Revoke -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RevokeNotFound:
    status: Literal["not_found"] = "not_found"


@dataclass(frozen=True, slots=True)
class RevokeSucceeded:
    status: Literal["succeeded"] = "succeeded"


RevokeResult = RevokeNotFound | RevokeSucceeded


@dataclass(frozen=True, slots=True)
class RevokeRenamedNotFound:
    status: Literal["not_found"] = "not_found"


@dataclass(frozen=True, slots=True)
class RevokeRenamedChannelIdUnmatch:
    linked_channel_id: str
    status: Literal["channel_id_unmatch"] = "channel_id_unmatch"


@dataclass(frozen=True, slots=True)
class RevokeRenamedSucceeded:
    status: Literal["succeeded"] = "succeeded"


RevokeRenamedResult = (
    RevokeRenamedNotFound | RevokeRenamedChannelIdUnmatch | RevokeRenamedSucceeded
)


def generate_random_token() -> str:
    """Gera token hex com 16 bytes de entropia criptográfica."""
    return secrets.token_bytes(TOKEN_BYTES).hex()


class TokenService:
    """Serviço de ciclo de vida de tokens.

    Args:
        store: Implementação de CredentialStoreProtocol.
        generator: Fonte de tokens (padrão: secrets). Injetável em testes.
        clock: Fonte de created_at (padrão: relógio do sistema, UTC).
    """

    def __init__(
        self,
        store: CredentialStoreProtocol,
        generator: Callable[[], str] | None = None,
        clock: Callable[[], str] | None = None,
    ) -> None:
        self._store = store
        self._generate = generator or generate_random_token
        self._now = clock or format_created_at

    async def get_tokens(self, channel_name: str) -> list[Entry]:
        """Lista tokens do canal ordenados por version.

        Raises:
            CorruptRecordError: created_at armazenado ilegível.
            CredentialStoreError: Falha do store.
        """
        records = sort_by_version(await self._store.query_by_name(channel_name))
        entries: list[Entry] = []
        for record in records:
            try:
                entries.append(record_to_entry(record))
            except ValueError as exc:
                logger.error(
                    "credential_record_corrupt",
                    extra={
                        "channel_name": channel_name,
                        "version": record.version,
                    },
                )
                raise CorruptRecordError(
                    f"invalid created_at: channel_name={channel_name}, "
                    f"version={record.version}"
                ) from exc
        return entries

    async def verify_token(self, channel_name: str, given_token: str) -> VerifyResult:
        """Verifica token recebido contra todos os tokens do canal.

        Compara em tempo constante e percorre todos os registros,
        mesmo após encontrar um que case.
        """
        records = await self._store.query_by_name(channel_name)
        if not records:
            return VerifyNotFound()

        given = given_token.encode()
        matched: CredentialRecord | None = None
        for record in sort_by_version(records):
            if hmac.compare_digest(record.token.encode(), given) and matched is None:
                matched = record

        if matched is None:
            return VerifyUnmatch()
        return VerifyMatched(
            channel_id=matched.channel_id,
            channel_name=matched.channel_name,
        )

    async def generate_and_save_token(
        self,
        channel_id: str,
        channel_name: str,
    ) -> GenerateResult:
        """Cria o token version 0 do canal, ou devolve o já existente.

        Raises:
            TokenGenerationError: Fonte de entropia indisponível.
            CredentialConflictError: Outro generate venceu a corrida.
            CredentialStoreError: Falha do store.
        """
        records = sort_by_version(await self._store.query_by_name(channel_name))
        if records:
            return GenerateResult(token=records[0].token, is_generated=False)

        token = self._new_token(existing=set())
        record = CredentialRecord(
            channel_name=channel_name,
            channel_id=channel_id,
            token=token,
            version=0,
            created_at=self._now(),
        )
        await self._store.save(record)

        logger.info(
            "token_generated",
            extra={
                "channel_id": channel_id,
                "channel_name": channel_name,
                "version": 0,
                "token": mask_token(token),
            },
        )
        return GenerateResult(token=token, is_generated=True)

    async def regenerate_token(
        self,
        channel_id: str,
        channel_name: str,
    ) -> RegenerateResult:
        """Cria um segundo token (rotação) mantendo o atual válido.

        Raises:
            TokenGenerationError: Colisão em todas as tentativas.
            CredentialConflictError: Outro regenerate gravou a mesma version.
            CredentialStoreError: Falha do store.
        """
        records = sort_by_version(await self._store.query_by_name(channel_name))
        if not records:
            return RegenerateNoTokenFound()
        if len(records) >= MAX_TOKEN_COUNT:
            return RegenerateTooManyTokens()

        token = self._new_token(existing={r.token for r in records})
        version = records[-1].version + 1
        record = CredentialRecord(
            channel_name=channel_name,
            channel_id=channel_id,
            token=token,
            version=version,
            created_at=self._now(),
        )
        await self._store.save(record)

        logger.info(
            "token_regenerated",
            extra={
                "channel_id": channel_id,
                "channel_name": channel_name,
                "version": version,
                "token": mask_token(token),
            },
        )
        return RegenerateSucceeded(token=token)

    async def revoke_token(self, channel_name: str, given_token: str) -> RevokeResult:
        """Remove o registro do canal cujo token é exatamente o informado."""
        records = sort_by_version(await self._store.query_by_name(channel_name))
        for record in records:
            if record.token != given_token:
                continue
            try:
                await self._store.delete(record)
            except CredentialNotFoundError:
                # Revogado por outra requisição entre a leitura e o delete
                return RevokeNotFound()
            logger.info(
                "token_revoked",
                extra={
                    "channel_name": channel_name,
                    "version": record.version,
                    "token": mask_token(given_token),
                },
            )
            return RevokeSucceeded()
        return RevokeNotFound()

    async def revoke_renamed_token(
        self,
        channel_id: str,
        given_channel_name: str,
        given_token: str,
    ) -> RevokeRenamedResult:
        """Revoga token emitido sob um nome antigo de canal.

        A remoção é recusada quando o registro pertence ao próprio
        channel_id do chamador; nesse caso o caminho é o revoke normal.
        """
        records = sort_by_version(await self._store.query_by_name(given_channel_name))
        for record in records:
            if record.token != given_token:
                continue
            if record.channel_id == channel_id:
                return RevokeRenamedChannelIdUnmatch(linked_channel_id=record.channel_id)
            try:
                await self._store.delete(record)
            except CredentialNotFoundError:
                return RevokeRenamedNotFound()
            logger.info(
                "renamed_token_revoked",
                extra={
                    "channel_id": channel_id,
                    "linked_channel_id": record.channel_id,
                    "channel_name": given_channel_name,
                    "version": record.version,
                    "token": mask_token(given_token),
                },
            )
            return RevokeRenamedSucceeded()
        return RevokeRenamedNotFound()

    def _new_token(self, existing: set[str]) -> str:
        for attempt in range(1, MAX_GENERATION_ATTEMPTS + 1):
            try:
                token = self._generate()
            except OSError as exc:
                logger.critical("token_entropy_unavailable", extra={"error": str(exc)})
                raise TokenGenerationError("secure random source failed") from exc
            if token not in existing:
                return token
            logger.warning("token_collision", extra={"attempt": attempt})
        raise TokenGenerationError(
            f"token collided {MAX_GENERATION_ATTEMPTS} times, random source is broken"
        )
