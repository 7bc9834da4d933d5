"""Protocolos para o diretório de canais do Slack.

Lista canais, resolve um canal por id e envia mensagens. O resultado
de envio é classificado em exatamente quatro casos.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol


@dataclass(frozen=True, slots=True)
class Channel:
    """Canal conforme visto pelo Slack no momento da consulta."""

    id: str
    name: str
    is_archived: bool = False
    is_channel: bool = True
    is_group: bool = False


@dataclass(frozen=True, slots=True)
class PostOk:
    """Mensagem aceita pelo Slack."""

    status: Literal["ok"] = "ok"


@dataclass(frozen=True, slots=True)
class PostTimeout:
    """Slack não respondeu dentro do timeout (após retries)."""

    status: Literal["timeout"] = "timeout"


@dataclass(frozen=True, slots=True)
class PostServerError:
    """Slack respondeu com status HTTP de erro (após retries)."""

    status_code: int
    body: str
    status: Literal["server_error"] = "server_error"


@dataclass(frozen=True, slots=True)
class PostRejected:
    """Slack respondeu ok=false (ex: channel_not_found, not_in_channel)."""

    reason: str
    channel_id: str = ""
    channel_name: str = ""
    status: Literal["rejected"] = "rejected"


PostResult = PostOk | PostTimeout | PostServerError | PostRejected


class ChannelDirectoryProtocol(Protocol):
    """Contrato mínimo para o diretório de canais."""

    async def list_channels(self) -> list[Channel]: ...

    async def get_channel(self, channel_id: str) -> Channel | None: ...

    async def post_message(
        self,
        channel_id_or_name: str,
        channel_name: str,
        payload: dict[str, Any],
    ) -> PostResult: ...
