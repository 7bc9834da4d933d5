"""Testes da reconciliação entre credenciais e canais do Slack."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from app.infra.stores import MemoryCredentialStore
from app.protocols.channel_directory import (
    Channel,
    PostRejected,
    PostServerError,
    PostTimeout,
)
from app.protocols.credential_store import CredentialStoreError
from app.services.reconciliation import (
    NotificationError,
    ReconciliationService,
    classify,
)
from tests.fakes.credential_records import make_record
from tests.fakes.fake_channel_directory import FakeChannelDirectory

OPS = "ops-alerts"


def _service(records, channels, **directory_kwargs):
    store = MemoryCredentialStore(records)
    directory = FakeChannelDirectory(channels=channels, **directory_kwargs)
    return ReconciliationService(store, directory, OPS), store, directory


class TestClassify:
    """Cenários de classificação (função pura)."""

    def test_consistent_state_has_no_events(self) -> None:
        """Registro e canal coerentes → nenhum evento."""
        archived, migrations, renames = classify(
            [make_record("general", "C1", "A")],
            [Channel(id="C1", name="general")],
        )

        assert (archived, migrations, renames) == ([], [], [])

    def test_two_tokens_produce_single_migration(self) -> None:
        """Dois tokens do mesmo canal → exatamente uma migração."""
        _, migrations, renames = classify(
            [make_record("general", "C1", "A", 0), make_record("general", "C1", "B", 1)],
            [Channel(id="C1", name="general")],
        )

        assert len(migrations) == 1
        assert migrations[0].channel_name == "general"
        assert migrations[0].channel_id == "C1"
        assert renames == []

    def test_renamed_channel_carries_saved_token(self) -> None:
        """Nome divergente → um evento de rename com o token antigo."""
        _, migrations, renames = classify(
            [make_record("general", "C1", "A")],
            [Channel(id="C1", name="random")],
        )

        assert migrations == []
        assert len(renames) == 1
        assert renames[0].old_name == "general"
        assert renames[0].new_name == "random"
        assert renames[0].saved_token == "A"

    def test_archived_record_skips_other_checks(self) -> None:
        """Canal arquivado e renomeado gera só o evento de arquivamento."""
        archived, migrations, renames = classify(
            [make_record("archived-chan", "C2", "X"), make_record("archived-chan", "C2", "Y", 1)],
            [Channel(id="C2", name="renamed-later", is_archived=True)],
        )

        assert len(archived) == 2
        assert archived[0].slack_channel_name == "renamed-later"
        assert migrations == []
        assert renames == []

    def test_unknown_channel_id_is_ignored(self) -> None:
        """Registro cujo canal não aparece na listagem não gera evento."""
        archived, migrations, renames = classify(
            [make_record("ghost", "C404", "A")],
            [Channel(id="C1", name="general")],
        )

        assert (archived, migrations, renames) == ([], [], [])


class TestReconciliationService:
    """Testes da execução com efeitos (store + notificações)."""

    @pytest.mark.asyncio
    async def test_consistent_state_sends_nothing(self) -> None:
        """Sem eventos, nenhuma mensagem é enviada."""
        service, _, directory = _service(
            [make_record("general", "C1", "A")], [Channel(id="C1", name="general")]
        )

        report = await service.run()

        assert report.to_dict() == {
            "records": 1,
            "channels": 1,
            "archived": 0,
            "migrations": 0,
            "renames": 0,
        }
        assert directory.posted == []

    @pytest.mark.asyncio
    async def test_archived_record_is_deleted_after_ops_notice(self) -> None:
        """Arquivamento avisa ops e remove o registro."""
        service, store, directory = _service(
            [make_record("archived-chan", "C2", "X")],
            [Channel(id="C2", name="archived-chan", is_archived=True)],
        )

        report = await service.run()

        assert len(report.archived) == 1
        assert report.migrations == []
        assert report.renames == []
        assert await store.scan_all() == []
        assert directory.destinations() == [OPS]
        assert "Channel is archived" in directory.posted[0].payload["text"]

    @pytest.mark.asyncio
    async def test_migration_notifies_channel_then_ops(self) -> None:
        """Migração avisa o canal e depois ops."""
        service, store, directory = _service(
            [make_record("general", "C1", "A", 0), make_record("general", "C1", "B", 1)],
            [Channel(id="C1", name="general")],
        )

        report = await service.run()

        assert len(report.migrations) == 1
        assert directory.destinations() == ["C1", OPS]
        assert "Token is in migration" in directory.posted[1].payload["text"]
        assert len(await store.scan_all()) == 2

    @pytest.mark.asyncio
    async def test_rename_notifies_new_channel_with_instructions(self) -> None:
        """Rename avisa o canal com as instruções de revoke-renamed."""
        service, _, directory = _service(
            [make_record("general", "C1", "A")], [Channel(id="C1", name="random")]
        )

        report = await service.run()

        assert len(report.renames) == 1
        assert directory.destinations() == ["C1", OPS]
        assert directory.posted[0].channel_name == "random"
        channel_text = directory.posted[0].payload["text"]
        assert "/relay-revoke-renamed" in channel_text
        assert "channel_name=general and token=A" in channel_text

    @pytest.mark.asyncio
    async def test_events_processed_in_fixed_order(self) -> None:
        """Ordem: arquivados, migrações, renames."""
        service, _, directory = _service(
            [
                make_record("renamed", "C3", "R"),
                make_record("general", "C1", "A", 0),
                make_record("general", "C1", "B", 1),
                make_record("old", "C2", "X"),
            ],
            [
                Channel(id="C1", name="general"),
                Channel(id="C2", name="old", is_archived=True),
                Channel(id="C3", name="renamed-now"),
            ],
        )

        await service.run()

        assert directory.destinations() == [OPS, "C1", OPS, "C3", OPS]

    @pytest.mark.asyncio
    async def test_failed_notification_aborts_before_delete(self) -> None:
        """Falha ao avisar ops interrompe a execução sem remover o registro."""
        service, store, _ = _service(
            [make_record("old", "C2", "X")],
            [Channel(id="C2", name="old", is_archived=True)],
            results={OPS: PostTimeout()},
        )

        with pytest.raises(NotificationError) as exc_info:
            await service.run()

        assert isinstance(exc_info.value.result, PostTimeout)
        assert len(await store.scan_all()) == 1

    @pytest.mark.asyncio
    async def test_rejected_channel_post_skips_ops(self) -> None:
        """Se o canal rejeita a mensagem, ops não é avisado."""
        service, _, directory = _service(
            [make_record("general", "C1", "A")],
            [Channel(id="C1", name="random")],
            results={"C1": PostRejected(reason="not_in_channel", channel_id="C1")},
        )

        with pytest.raises(NotificationError, match="not_in_channel"):
            await service.run()

        assert directory.destinations() == ["C1"]

    @pytest.mark.asyncio
    async def test_server_error_message_includes_status(self) -> None:
        """Erro 5xx do Slack aparece na mensagem da exceção."""
        service, _, _ = _service(
            [make_record("general", "C1", "A", 0), make_record("general", "C1", "B", 1)],
            [Channel(id="C1", name="general")],
            results={"C1": PostServerError(status_code=503, body="down")},
        )

        with pytest.raises(NotificationError, match="code=503"):
            await service.run()

    @pytest.mark.asyncio
    async def test_list_channels_failure_propagates(self) -> None:
        """Falha na listagem de canais propaga sem notificações."""
        service, _, directory = _service(
            [make_record()], [], list_error=RuntimeError("slack down")
        )

        with pytest.raises(RuntimeError):
            await service.run()

        assert directory.posted == []

    @pytest.mark.asyncio
    async def test_store_scan_failure_aborts_before_listing(self) -> None:
        """Falha ao ler o store interrompe antes de listar canais ou notificar."""
        store = AsyncMock()
        store.scan_all.side_effect = CredentialStoreError("redis unavailable")
        directory = FakeChannelDirectory(channels=[Channel(id="C1", name="general")])
        directory.list_channels = AsyncMock(return_value=[])

        with pytest.raises(CredentialStoreError):
            await ReconciliationService(store, directory, OPS).run()

        directory.list_channels.assert_not_awaited()
        assert directory.posted == []
        store.delete.assert_not_awaited()
