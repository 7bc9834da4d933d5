"""Testes do MemoryCredentialStore."""

from __future__ import annotations

import pytest

from app.infra.stores import MemoryCredentialStore
from app.protocols.credential_store import CredentialConflictError, CredentialNotFoundError
from tests.fakes.credential_records import make_record


class TestMemoryCredentialStore:
    """Testes de escrita/remoção condicionais em memória."""

    @pytest.mark.asyncio
    async def test_save_and_query(self) -> None:
        """Deve salvar e consultar pelo nome do canal."""
        store = MemoryCredentialStore()
        record = make_record("general", version=0)

        await store.save(record)

        assert await store.query_by_name("general") == [record]
        assert await store.query_by_name("random") == []

    @pytest.mark.asyncio
    async def test_save_same_version_conflicts(self) -> None:
        """Segunda escrita em (channel_name, version) levanta conflito."""
        store = MemoryCredentialStore([make_record("general", version=0)])

        with pytest.raises(CredentialConflictError) as exc_info:
            await store.save(make_record("general", token="other", version=0))

        assert exc_info.value.version == 0

    @pytest.mark.asyncio
    async def test_delete_requires_matching_token(self) -> None:
        """Delete com token diferente não remove nada."""
        stored = make_record("general", token="t1")
        store = MemoryCredentialStore([stored])

        with pytest.raises(CredentialNotFoundError):
            await store.delete(make_record("general", token="t2"))

        await store.delete(stored)
        assert await store.scan_all() == []

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self) -> None:
        """Delete de registro inexistente levanta NotFound."""
        with pytest.raises(CredentialNotFoundError):
            await MemoryCredentialStore().delete(make_record())

    @pytest.mark.asyncio
    async def test_scan_all_returns_every_channel(self) -> None:
        """scan_all retorna registros de todos os canais."""
        store = MemoryCredentialStore(
            [make_record("a", version=0), make_record("b", version=0), make_record("b", version=1)]
        )

        names = sorted((r.channel_name, r.version) for r in await store.scan_all())

        assert names == [("a", 0), ("b", 0), ("b", 1)]
