"""Use case de relay: webhook recebido → canal do Slack.

Fluxo:
1. Verifica (channel_name, token) no TokenService
2. Extrai payload JSON do corpo (JSON ou form com campo payload)
3. Envia via chat.postMessage para o channel_id ligado ao token
4. Traduz o resultado do Slack em status HTTP para o chamador
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from api.connectors.slack.webhook_payload import InvalidPayloadError, parse_webhook_body
from app.constants.slash_commands import CMD_GENERATE
from app.observability import record_latency, record_relay_outcome
from app.protocols.channel_directory import (
    PostOk,
    PostRejected,
    PostServerError,
    PostTimeout,
)
from app.services.token_service import VerifyNotFound, VerifyUnmatch

if TYPE_CHECKING:
    from app.protocols.channel_directory import ChannelDirectoryProtocol, PostResult
    from app.services.token_service import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RelayResponse:
    """Resposta HTTP do relay (texto puro)."""

    status_code: int
    body: str
    outcome: str


class RelayWebhookUseCase:
    """Encaminha webhooks autenticados por token para o Slack."""

    def __init__(
        self,
        *,
        token_service: TokenService,
        directory: ChannelDirectoryProtocol,
    ) -> None:
        self._tokens = token_service
        self._directory = directory

    async def execute(
        self,
        channel_name: str,
        token: str,
        raw_body: bytes,
        content_type: str | None,
    ) -> RelayResponse:
        """Processa um webhook.

        Raises:
            CredentialStoreError: Falha ao consultar tokens.
            SlackApiError: Falha de transporte inesperada no envio.
        """
        verified = await self._tokens.verify_token(channel_name, token)
        if isinstance(verified, VerifyNotFound):
            logger.info("relay_token_not_generated", extra={"channel_name": channel_name})
            return self._finish(
                channel_name,
                404,
                f"No token generated for {channel_name}, generate token with "
                f"`{CMD_GENERATE}` slash command.\n",
                "not_found",
            )
        if isinstance(verified, VerifyUnmatch):
            logger.info("relay_token_unmatch", extra={"channel_name": channel_name})
            return self._finish(
                channel_name,
                401,
                "Invalid token given. Check generated URL.\n",
                "unmatch",
            )

        try:
            payload = parse_webhook_body(raw_body, content_type)
        except InvalidPayloadError as exc:
            logger.info(
                "relay_invalid_body",
                extra={"channel_name": channel_name, "error": str(exc)},
            )
            return self._finish(
                channel_name,
                400,
                "Invalid body given. JSON Unmarshal failed.\n",
                "invalid_body",
            )

        start = time.perf_counter()
        result = await self._directory.post_message(
            verified.channel_id, verified.channel_name, payload
        )
        record_latency("relay", "post_message", (time.perf_counter() - start) * 1000)
        return self._translate(verified.channel_id, verified.channel_name, result)

    def _translate(
        self,
        channel_id: str,
        channel_name: str,
        result: PostResult,
    ) -> RelayResponse:
        if isinstance(result, PostOk):
            logger.info(
                "relay_post_succeeded",
                extra={"channel_id": channel_id, "channel_name": channel_name},
            )
            return self._finish(channel_name, 200, "ok.\n", "ok")

        if isinstance(result, PostTimeout):
            logger.warning(
                "relay_post_timeout",
                extra={"channel_id": channel_id, "channel_name": channel_name},
            )
            return self._finish(channel_name, 504, "Slack API timeout.\n", "timeout")

        if isinstance(result, PostServerError):
            message = f"Slack API error: status={result.status_code}, body={result.body}\n"
            if 500 <= result.status_code < 600:
                logger.warning(
                    "relay_post_server_error",
                    extra={"channel_name": channel_name, "status_code": result.status_code},
                )
                return self._finish(channel_name, 502, message, "server_error")
            if 400 <= result.status_code < 500:
                logger.info(
                    "relay_post_client_error",
                    extra={"channel_name": channel_name, "status_code": result.status_code},
                )
                return self._finish(channel_name, result.status_code, message, "client_error")
            logger.error(
                "relay_post_unexpected_status",
                extra={"channel_name": channel_name, "status_code": result.status_code},
            )
            return self._finish(
                channel_name, 500, "Internal server error.\n", "unexpected_status"
            )

        return self._rejected(result)

    def _rejected(self, result: PostRejected) -> RelayResponse:
        if result.reason == "channel_not_found":
            message = (
                "invite bot to the channel: "
                f"channelName={result.channel_name}, channelID={result.channel_id}, "
                f"reason={result.reason}"
            )
            return self._finish(result.channel_name, 400, message, "rejected")

        logger.warning(
            "relay_post_rejected",
            extra={
                "channel_id": result.channel_id,
                "channel_name": result.channel_name,
                "reason": result.reason,
            },
        )
        return self._finish(
            result.channel_name,
            400,
            f"Slack API responses error: reason={result.reason}",
            "rejected",
        )

    @staticmethod
    def _finish(channel_name: str, status_code: int, body: str, outcome: str) -> RelayResponse:
        record_relay_outcome(outcome, channel_name, status_code)
        return RelayResponse(status_code=status_code, body=body, outcome=outcome)
