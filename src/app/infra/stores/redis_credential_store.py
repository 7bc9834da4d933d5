"""Redis Credential Store — credenciais de webhook em Redis.

Um hash por channel_name:
    credential:<channel_name>  ->  { "<version>": "<json do registro>" }

HSETNX garante a escrita condicional em (channel_name, version).
O delete condicional roda num script Lua para comparar o token e
remover o campo de forma atômica.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from app.domain.credential import CredentialRecord
from app.protocols.credential_store import (
    CorruptRecordError,
    CredentialConflictError,
    CredentialNotFoundError,
    CredentialStoreError,
    CredentialStoreProtocol,
)
from config.settings.base.credential_store import DEFAULT_KEY_PREFIX

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

SCAN_BATCH_SIZE = 100

# KEYS[1] = hash do canal, ARGV[1] = version, ARGV[2] = token esperado
_DELETE_IF_TOKEN_MATCHES = """
local current = redis.call('HGET', KEYS[1], ARGV[1])
if not current then
    return 0
end
local record = cjson.decode(current)
if record['token'] ~= ARGV[2] then
    return 0
end
redis.call('HDEL', KEYS[1], ARGV[1])
return 1
"""


class RedisCredentialStore(CredentialStoreProtocol):
    """Store de credenciais usando Redis.

    Args:
        async_redis_client: Cliente Redis assíncrono
        key_prefix: Prefixo das chaves (default: credential:)
    """

    def __init__(
        self,
        async_redis_client: AsyncRedis,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ) -> None:
        self._redis = async_redis_client
        self._prefix = key_prefix

    def _key(self, channel_name: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{self._prefix}{channel_name}"

    async def save(self, record: CredentialRecord) -> None:
        """Salva registro se a version ainda não existir no hash."""
        try:
            created = await self._redis.hsetnx(
                self._key(record.channel_name),
                str(record.version),
                json.dumps(record.to_dict()),
            )
        except RedisError as exc:
            raise CredentialStoreError("Falha ao salvar credencial no Redis") from exc

        if not created:
            raise CredentialConflictError(record.channel_name, record.version)
        logger.debug(
            "credential_saved",
            extra={"channel_name": record.channel_name, "version": record.version},
        )

    async def query_by_name(self, channel_name: str) -> list[CredentialRecord]:
        """Retorna registros do canal (ordem de hash, não garantida)."""
        try:
            values = await self._redis.hvals(self._key(channel_name))
        except RedisError as exc:
            raise CredentialStoreError("Falha ao consultar credenciais no Redis") from exc
        return [_decode(value) for value in values]

    async def delete(self, record: CredentialRecord) -> None:
        """Remove registro se o token armazenado ainda for o mesmo."""
        try:
            deleted = await self._redis.eval(
                _DELETE_IF_TOKEN_MATCHES,
                1,
                self._key(record.channel_name),
                str(record.version),
                record.token,
            )
        except RedisError as exc:
            raise CredentialStoreError("Falha ao remover credencial no Redis") from exc

        if not deleted:
            raise CredentialNotFoundError(record.channel_name, record.version)
        logger.debug(
            "credential_deleted",
            extra={"channel_name": record.channel_name, "version": record.version},
        )

    async def scan_all(self) -> list[CredentialRecord]:
        """Percorre todas as chaves do prefixo com SCAN."""
        records: list[CredentialRecord] = []
        try:
            async for key in self._redis.scan_iter(
                match=f"{self._prefix}*", count=SCAN_BATCH_SIZE
            ):
                values = await self._redis.hvals(key)
                records.extend(_decode(value) for value in values)
        except RedisError as exc:
            raise CredentialStoreError("Falha ao varrer credenciais no Redis") from exc
        return records


def _decode(value: str | bytes) -> CredentialRecord:
    try:
        return CredentialRecord.from_dict(json.loads(value))
    except (KeyError, TypeError, ValueError) as exc:
        raise CorruptRecordError("Registro de credencial ilegível no Redis") from exc
