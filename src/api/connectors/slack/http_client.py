"""Cliente HTTP especializado para a Web API do Slack.

Estende HttpClient genérico com:
- Bearer token do bot em todas as chamadas
- Classificação do chat.postMessage em PostOk/PostTimeout/PostServerError/PostRejected
- Paginação por cursor em conversations.list (arquivados incluídos)
- conversations.info com channel_not_found virando None

Implementa ChannelDirectoryProtocol.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.connectors.slack.errors import SlackApiError
from app.infra.http import HttpClient, HttpClientConfig, HttpError
from app.protocols.channel_directory import (
    Channel,
    PostOk,
    PostRejected,
    PostResult,
    PostServerError,
    PostTimeout,
)
from config.settings.slack import SLACK_API_BASE_URL

if TYPE_CHECKING:
    import httpx

    from config.settings import SlackSettings

logger: logging.Logger = logging.getLogger(__name__)

PAGINATION_LIMIT = 200
CHANNEL_TYPES = "public_channel,private_channel"


def build_http_config(settings: SlackSettings) -> HttpClientConfig:
    """Converte settings de retry em HttpClientConfig."""
    return HttpClientConfig(
        timeout_seconds=settings.read_timeout_seconds,
        max_retries=settings.retry_max,
        backoff_base_seconds=settings.retry_wait_min_seconds,
        backoff_max_seconds=settings.retry_wait_max_seconds,
    )


class SlackClient(HttpClient):
    """Cliente da Web API do Slack.

    Args:
        token: Token do bot (xoxb-...)
        config: Configuração HTTP (timeout e retries)
        base_url: URL base da Web API
        transport: Transport httpx alternativo (testes)
    """

    def __init__(
        self,
        token: str,
        config: HttpClientConfig | None = None,
        *,
        base_url: str = SLACK_API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(config, transport=transport)
        self._token = token
        self._base_url = base_url.rstrip("/")

    def _url(self, method: str) -> str:
        return f"{self._base_url}/{method}"

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    async def post_message(
        self,
        channel_id_or_name: str,
        channel_name: str,
        payload: dict[str, Any],
    ) -> PostResult:
        """Envia payload via chat.postMessage.

        Raises:
            SlackApiError: Falha de transporte que não é timeout,
                ou resposta 200 com corpo ilegível.
        """
        body = {**payload, "channel": channel_id_or_name}
        try:
            response = await self.post(
                self._url("chat.postMessage"),
                json=body,
                headers=self._auth_headers(),
            )
        except HttpError as exc:
            if exc.is_timeout:
                logger.info("slack_post_timeout", extra={"channel_name": channel_name})
                return PostTimeout()
            if exc.status_code is not None:
                return _server_error(exc.status_code, exc.body, channel_name)
            raise SlackApiError(
                "http request to slack API failed", method="chat.postMessage"
            ) from exc

        if response.status_code != 200:
            return _server_error(response.status_code, response.text, channel_name)

        data = _json_body(response, "chat.postMessage")
        if not data.get("ok"):
            reason = str(data.get("error", ""))
            logger.info(
                "slack_post_rejected",
                extra={"channel_name": channel_name, "reason": reason},
            )
            return PostRejected(
                reason=reason,
                channel_id=channel_id_or_name,
                channel_name=channel_name,
            )

        logger.debug("slack_post_ok", extra={"channel_name": channel_name})
        return PostOk()

    async def list_channels(self) -> list[Channel]:
        """Lista canais públicos e privados, arquivados incluídos.

        Raises:
            SlackApiError: Falha de transporte ou ok=false.
        """
        channels: list[Channel] = []
        cursor = ""
        while True:
            params: dict[str, Any] = {
                "types": CHANNEL_TYPES,
                "limit": PAGINATION_LIMIT,
                "exclude_archived": "false",
            }
            if cursor:
                params["cursor"] = cursor
            data = await self._call("conversations.list", params)
            channels.extend(_to_channel(raw) for raw in data.get("channels") or [])

            cursor = (data.get("response_metadata") or {}).get("next_cursor") or ""
            if not cursor:
                break

        logger.debug("slack_channels_listed", extra={"size": len(channels)})
        return channels

    async def get_channel(self, channel_id: str) -> Channel | None:
        """Resolve canal por id; None quando o bot não enxerga o canal.

        Raises:
            SlackApiError: Qualquer outra falha.
        """
        try:
            data = await self._call("conversations.info", {"channel": channel_id})
        except SlackApiError as exc:
            if exc.error_code == "channel_not_found":
                return None
            raise
        return _to_channel(data.get("channel") or {})

    async def _call(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self.get(
                self._url(method), params=params, headers=self._auth_headers()
            )
        except HttpError as exc:
            raise SlackApiError(f"{method} request failed", method=method) from exc

        if response.status_code != 200:
            raise SlackApiError(
                f"{method} returned status {response.status_code}", method=method
            )

        data = _json_body(response, method)
        if not data.get("ok"):
            error_code = str(data.get("error", ""))
            raise SlackApiError(
                f"{method} failed: {error_code}", method=method, error_code=error_code
            )
        return data


def _server_error(status_code: int, body: str, channel_name: str) -> PostServerError:
    logger.warning(
        "slack_post_server_error",
        extra={"channel_name": channel_name, "status_code": status_code},
    )
    return PostServerError(status_code=status_code, body=body)


def _json_body(response: httpx.Response, method: str) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        raise SlackApiError(f"{method} returned invalid JSON", method=method) from exc
    if not isinstance(data, dict):
        raise SlackApiError(f"{method} returned non-object JSON", method=method)
    return data


def _to_channel(raw: dict[str, Any]) -> Channel:
    return Channel(
        id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        is_archived=bool(raw.get("is_archived", False)),
        is_channel=bool(raw.get("is_channel", False)),
        is_group=bool(raw.get("is_group", False) or raw.get("is_private", False)),
    )
