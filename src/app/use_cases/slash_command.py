"""Use case de slash commands: comando do Slack → TokenService.

O nome do canal vem de conversations.info e não do corpo do comando:
para canais privados antigos o Slack envia um nome incorreto.
Respostas são sempre "in_channel" para que o canal veja o resultado.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.constants.slash_commands import (
    CMD_GENERATE,
    CMD_REGENERATE,
    CMD_REVOKE,
    CMD_REVOKE_RENAMED,
    CMD_SHOW,
    REVOKE_RENAMED_ARG_COUNT,
)
from app.observability import record_slash_command
from app.protocols.credential_store import CredentialConflictError
from app.services.token_service import (
    RegenerateNoTokenFound,
    RegenerateTooManyTokens,
    RevokeNotFound,
    RevokeRenamedChannelIdUnmatch,
    RevokeRenamedNotFound,
)

if TYPE_CHECKING:
    from api.connectors.slack.slash_command import SlashCommandRequest
    from app.protocols.channel_directory import ChannelDirectoryProtocol
    from app.services.token_service import TokenService

logger = logging.getLogger(__name__)

UNSUPPORTED_CHANNEL_MESSAGE = (
    "This relay only supports public/private channels. "
    "If this is a private channel, invite the bot.\n"
)
CONFLICT_MESSAGE = "Another token operation ran at the same time for this channel. Try again.\n"


@dataclass(frozen=True, slots=True)
class SlashCommandResponse:
    """Resposta do slash command (sempre visível no canal)."""

    text: str
    status: str
    response_type: str = "in_channel"

    def to_dict(self) -> dict[str, str]:
        return {"response_type": self.response_type, "text": self.text}


def build_webhook_url(domain: str, channel_name: str, token: str) -> str:
    """URL pública de webhook para um token."""
    return f"https://{domain}/p/{channel_name}/{token}/"


class SlashCommandUseCase:
    """Despacha slash commands para operações do TokenService.

    Args:
        token_service: Serviço de ciclo de vida de tokens
        directory: Diretório de canais (resolução de nome)
        custom_domain_name: Domínio das URLs; vazio usa o host do request
    """

    def __init__(
        self,
        *,
        token_service: TokenService,
        directory: ChannelDirectoryProtocol,
        custom_domain_name: str = "",
    ) -> None:
        self._tokens = token_service
        self._directory = directory
        self._custom_domain = custom_domain_name

    async def execute(self, request: SlashCommandRequest, host: str) -> SlashCommandResponse:
        """Executa o comando.

        Raises:
            CredentialStoreError: Falha do store (exceto conflito de escrita).
            TokenGenerationError: Fonte de entropia quebrada.
            SlackApiError: Falha ao resolver o canal.
        """
        channel = await self._directory.get_channel(request.channel_id)
        supported = channel is not None and (channel.is_channel or channel.is_group)
        channel_name = channel.name if channel is not None else request.channel_name

        logger.info(
            "slash_command_received",
            extra={
                "command": request.command,
                "channel_id": request.channel_id,
                "channel_name": channel_name,
                "original_channel_name": request.channel_name,
                "supported": supported,
            },
        )

        if not supported:
            response = SlashCommandResponse(UNSUPPORTED_CHANNEL_MESSAGE, "unsupported_channel")
        else:
            domain = self._custom_domain or host
            try:
                response = await self._dispatch(request, channel_name, domain)
            except CredentialConflictError:
                logger.warning(
                    "slash_command_conflict",
                    extra={"command": request.command, "channel_name": channel_name},
                )
                response = SlashCommandResponse(CONFLICT_MESSAGE, "conflict")

        record_slash_command(request.command, response.status)
        return response

    async def _dispatch(
        self,
        request: SlashCommandRequest,
        channel_name: str,
        domain: str,
    ) -> SlashCommandResponse:
        if request.command == CMD_SHOW:
            return await self._show(channel_name, domain)
        if request.command == CMD_GENERATE:
            return await self._generate(request.channel_id, channel_name, domain)
        if request.command == CMD_REGENERATE:
            return await self._regenerate(request.channel_id, channel_name, domain)
        if request.command == CMD_REVOKE:
            return await self._revoke(channel_name, request.text)
        if request.command == CMD_REVOKE_RENAMED:
            return await self._revoke_renamed(request.channel_id, request.text)

        logger.info("slash_command_unknown", extra={"command": request.command})
        return SlashCommandResponse("Missing command.\n", "unknown_command")

    async def _show(self, channel_name: str, domain: str) -> SlashCommandResponse:
        entries = await self._tokens.get_tokens(channel_name)
        if not entries:
            return SlashCommandResponse(
                "No token and url generated for this channel.\n", "empty"
            )
        lines = [
            f"- {entry.token} (v{entry.version}, "
            f"{entry.created_at.strftime('%Y-%m-%dT%H:%M:%SZ')}): "
            f"{build_webhook_url(domain, channel_name, entry.token)}"
            for entry in entries
        ]
        text = "Available tokens for this channel:\n" + "\n".join(lines) + "\n"
        return SlashCommandResponse(text, "listed")

    async def _generate(
        self, channel_id: str, channel_name: str, domain: str
    ) -> SlashCommandResponse:
        result = await self._tokens.generate_and_save_token(channel_id, channel_name)
        if not result.is_generated:
            return SlashCommandResponse(
                "Token already generated. "
                f"To check generated token, use `{CMD_SHOW}`. "
                f"To generate another token, use `{CMD_REGENERATE}`.\n",
                result.status,
            )
        url = build_webhook_url(domain, channel_name, result.token)
        return SlashCommandResponse(
            f"Token generated: {result.token}, {url}", result.status
        )

    async def _regenerate(
        self, channel_id: str, channel_name: str, domain: str
    ) -> SlashCommandResponse:
        result = await self._tokens.regenerate_token(channel_id, channel_name)
        if isinstance(result, RegenerateNoTokenFound):
            return SlashCommandResponse(
                "No token have been generated for this channel. "
                f"Use `{CMD_GENERATE}` to generate token.\n",
                result.status,
            )
        if isinstance(result, RegenerateTooManyTokens):
            return SlashCommandResponse(
                "Two tokens have been generated for this channel. "
                f"Ensure old token is not used, then revoke it with `{CMD_REVOKE}`.\n",
                result.status,
            )
        url = build_webhook_url(domain, channel_name, result.token)
        return SlashCommandResponse(
            f"Another token generated for this channel: {url}", result.status
        )

    async def _revoke(self, channel_name: str, token: str) -> SlashCommandResponse:
        result = await self._tokens.revoke_token(channel_name, token)
        if isinstance(result, RevokeNotFound):
            return SlashCommandResponse(
                "No pair found, check the token: "
                f"channel_name={channel_name}, token={token}\n",
                result.status,
            )
        return SlashCommandResponse(
            f"Token revoked: channel_name={channel_name}, token={token}\n",
            result.status,
        )

    async def _revoke_renamed(self, channel_id: str, text: str) -> SlashCommandResponse:
        args = text.split()
        if len(args) != REVOKE_RENAMED_ARG_COUNT:
            return SlashCommandResponse(
                "Invalid arguments for the slash command. "
                "This command expects `<channel name> <token>` as arguments.\n",
                "invalid_arguments",
            )

        old_channel_name, token = args
        result = await self._tokens.revoke_renamed_token(channel_id, old_channel_name, token)
        if isinstance(result, RevokeRenamedNotFound):
            return SlashCommandResponse(
                "No pair found, check the token: "
                f"channel_name={old_channel_name}, token={token}\n",
                result.status,
            )
        if isinstance(result, RevokeRenamedChannelIdUnmatch):
            return SlashCommandResponse(
                "Found pair but the token is linked to this channel, use "
                f"`{CMD_REVOKE}` instead: "
                f"channel_name={old_channel_name}, token={token}, "
                f"linked_channel_id={result.linked_channel_id}, channel_id={channel_id}\n",
                result.status,
            )
        return SlashCommandResponse(
            f"Token revoked: old_channel_name={old_channel_name}, token={token}\n",
            result.status,
        )
