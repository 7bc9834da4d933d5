"""Fake in-memory do diretório de canais do Slack para testes deterministas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.protocols.channel_directory import Channel, PostOk, PostResult


@dataclass
class PostedMessage:
    channel_id_or_name: str
    channel_name: str
    payload: dict[str, Any]


@dataclass
class FakeChannelDirectory:
    """Implementa ChannelDirectoryProtocol sem IO.

    ``results`` mapeia destino (id ou nome) → resultado do post;
    destinos sem entrada recebem PostOk.
    """

    channels: list[Channel] = field(default_factory=list)
    results: dict[str, PostResult] = field(default_factory=dict)
    posted: list[PostedMessage] = field(default_factory=list)
    list_error: Exception | None = None

    async def list_channels(self) -> list[Channel]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.channels)

    async def get_channel(self, channel_id: str) -> Channel | None:
        for channel in self.channels:
            if channel.id == channel_id:
                return channel
        return None

    async def post_message(
        self,
        channel_id_or_name: str,
        channel_name: str,
        payload: dict[str, Any],
    ) -> PostResult:
        self.posted.append(PostedMessage(channel_id_or_name, channel_name, payload))
        return self.results.get(channel_id_or_name, PostOk())

    def destinations(self) -> list[str]:
        return [message.channel_id_or_name for message in self.posted]
