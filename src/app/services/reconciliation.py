"""Reconciliação entre credenciais armazenadas e canais do Slack.

Job em lote, sem estado entre execuções: cada execução reconstrói os
eventos a partir do store e da listagem atual de canais, então pode
ser repetida com segurança.

Eventos detectados:
- archived: canal arquivado no Slack; registro removido e ops avisado
- migration: dois tokens vivos para o mesmo (channel_id, channel_name)
- renamed: channel_id listado com nome diferente do armazenado
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.protocols.channel_directory import PostOk, PostServerError, PostTimeout

if TYPE_CHECKING:
    from app.domain.credential import CredentialRecord
    from app.protocols.channel_directory import (
        Channel,
        ChannelDirectoryProtocol,
        PostResult,
    )
    from app.protocols.credential_store import CredentialStoreProtocol

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Envio de notificação não retornou PostOk; a execução é abortada."""

    def __init__(self, message: str, result: PostResult) -> None:
        super().__init__(message)
        self.result = result


@dataclass(frozen=True, slots=True)
class ArchiveEvent:
    record: CredentialRecord
    slack_channel_name: str


@dataclass(frozen=True, slots=True)
class MigrationEvent:
    channel_id: str
    channel_name: str


@dataclass(frozen=True, slots=True)
class RenameEvent:
    channel_id: str
    old_name: str
    new_name: str
    saved_token: str


@dataclass(frozen=True, slots=True)
class ReconciliationReport:
    """Resumo de uma execução."""

    record_count: int
    channel_count: int
    archived: list[ArchiveEvent] = field(default_factory=list)
    migrations: list[MigrationEvent] = field(default_factory=list)
    renames: list[RenameEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, int]:
        """Contagens para logs e saída do script."""
        return {
            "records": self.record_count,
            "channels": self.channel_count,
            "archived": len(self.archived),
            "migrations": len(self.migrations),
            "renames": len(self.renames),
        }


def classify(
    records: list[CredentialRecord],
    channels: list[Channel],
) -> tuple[list[ArchiveEvent], list[MigrationEvent], list[RenameEvent]]:
    """Classifica registros em eventos, sem efeitos colaterais.

    Registros de canais arquivados não participam de migration/renamed.
    """
    by_id = {channel.id: channel for channel in channels}

    archived: list[ArchiveEvent] = []
    live: list[CredentialRecord] = []
    for record in records:
        channel = by_id.get(record.channel_id)
        if channel is not None and channel.is_archived:
            archived.append(ArchiveEvent(record=record, slack_channel_name=channel.name))
        else:
            live.append(record)

    # Um evento por channel_name, na ordem da primeira ocorrência
    migrations: dict[str, MigrationEvent] = {}
    renames: list[RenameEvent] = []
    for record in live:
        for other in live:
            if (
                record.channel_id == other.channel_id
                and record.channel_name == other.channel_name
                and record.token != other.token
            ):
                migrations.setdefault(
                    record.channel_name,
                    MigrationEvent(
                        channel_id=record.channel_id,
                        channel_name=record.channel_name,
                    ),
                )
                break

        channel = by_id.get(record.channel_id)
        if channel is not None and channel.name != record.channel_name:
            renames.append(
                RenameEvent(
                    channel_id=record.channel_id,
                    old_name=record.channel_name,
                    new_name=channel.name,
                    saved_token=record.token,
                )
            )

    return archived, list(migrations.values()), renames


def archived_ops_message(event: ArchiveEvent) -> str:
    return (
        "Channel is archived, deleting record: "
        f"channel_id={event.record.channel_id}, "
        f"record_channel_name={event.record.channel_name}, "
        f"slack_channel_name={event.slack_channel_name}\n"
    )


def migration_ops_message(event: MigrationEvent) -> str:
    return (
        "Token is in migration: "
        f"channel_name={event.channel_name}, channel_id={event.channel_id}\n"
    )


def migration_channel_message(event: MigrationEvent) -> str:
    return (
        "Token is in migration. Once all old webhook URLs are replaced, "
        "revoke old token: "
        f"channel_name={event.channel_name}, channel_id={event.channel_id}\n"
    )


def rename_ops_message(event: RenameEvent) -> str:
    return (
        "Channel name and channel id pair updated: "
        f"channel_id={event.channel_id}, old_channel_name={event.old_name}, "
        f"renamed_channel_name={event.new_name}\n"
    )


def rename_channel_message(event: RenameEvent) -> str:
    return (
        "Detect channel renaming for this channel: "
        f"channel_id={event.channel_id}, old_channel_name={event.old_name}, "
        f"renamed_channel_name={event.new_name}\n"
        "\n"
        "1. Generate new token in this channel.\n"
        "2. Replace old webhook URLs with new URLs.\n"
        "3. When all old URLs are replaced, revoke old token with "
        '"/relay-revoke-renamed" using '
        f"channel_name={event.old_name} and token={event.saved_token}\n"
    )


class ReconciliationService:
    """Executa uma passada de reconciliação.

    Args:
        store: Implementação de CredentialStoreProtocol.
        directory: Diretório de canais (SlackClient).
        ops_channel_name: Canal que recebe cópia de todas as notificações.
    """

    def __init__(
        self,
        store: CredentialStoreProtocol,
        directory: ChannelDirectoryProtocol,
        ops_channel_name: str,
    ) -> None:
        self._store = store
        self._directory = directory
        self._ops_channel_name = ops_channel_name

    async def run(self) -> ReconciliationReport:
        """Executa a reconciliação completa.

        Raises:
            CredentialStoreError: Falha ao ler ou remover registros.
            SlackApiError: Falha ao listar canais.
            NotificationError: Alguma notificação não foi aceita.
        """
        records = await self._store.scan_all()
        logger.info("reconcile_records_loaded", extra={"size": len(records)})

        channels = await self._directory.list_channels()
        logger.info("reconcile_channels_loaded", extra={"size": len(channels)})

        archived, migrations, renames = classify(records, channels)

        logger.info("reconcile_processing_archived", extra={"size": len(archived)})
        for archive in archived:
            logger.info(
                "reconcile_channel_archived",
                extra={
                    "channel_id": archive.record.channel_id,
                    "record_channel_name": archive.record.channel_name,
                    "slack_channel_name": archive.slack_channel_name,
                },
            )
            await self._notify_ops(archived_ops_message(archive))
            await self._store.delete(archive.record)

        logger.info("reconcile_processing_migrations", extra={"size": len(migrations)})
        for migration in migrations:
            logger.info(
                "reconcile_token_in_migration",
                extra={
                    "channel_id": migration.channel_id,
                    "channel_name": migration.channel_name,
                },
            )
            await self._notify(
                migration.channel_id,
                migration.channel_name,
                migration_channel_message(migration),
                migration_ops_message(migration),
            )

        logger.info("reconcile_processing_renames", extra={"size": len(renames)})
        for rename in renames:
            logger.info(
                "reconcile_channel_renamed",
                extra={
                    "channel_id": rename.channel_id,
                    "old_channel_name": rename.old_name,
                    "renamed_channel_name": rename.new_name,
                },
            )
            await self._notify(
                rename.channel_id,
                rename.new_name,
                rename_channel_message(rename),
                rename_ops_message(rename),
            )

        report = ReconciliationReport(
            record_count=len(records),
            channel_count=len(channels),
            archived=archived,
            migrations=migrations,
            renames=renames,
        )
        logger.info("reconcile_completed", extra=report.to_dict())
        return report

    async def _notify(
        self,
        channel_id: str,
        channel_name: str,
        message: str,
        ops_message: str,
    ) -> None:
        result = await self._directory.post_message(
            channel_id, channel_name, {"text": message}
        )
        _raise_for_post_result(result)
        await self._notify_ops(ops_message)

    async def _notify_ops(self, message: str) -> None:
        result = await self._directory.post_message(
            self._ops_channel_name, self._ops_channel_name, {"text": message}
        )
        _raise_for_post_result(result)


def _raise_for_post_result(result: PostResult) -> None:
    if isinstance(result, PostOk):
        return
    if isinstance(result, PostTimeout):
        raise NotificationError("slack server timeout", result)
    if isinstance(result, PostServerError):
        raise NotificationError(
            f"slack server error: code={result.status_code}, body={result.body}",
            result,
        )
    raise NotificationError(
        "slack API error: "
        f"channel_name={result.channel_name}, channel_id={result.channel_id}, "
        f"reason={result.reason}",
        result,
    )
