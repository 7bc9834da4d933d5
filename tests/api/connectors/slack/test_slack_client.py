"""Testes do SlackClient (Web API) com httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from api.connectors.slack import SlackApiError, SlackClient, build_http_config
from app.infra.http import HttpClientConfig
from app.protocols.channel_directory import (
    PostOk,
    PostRejected,
    PostServerError,
    PostTimeout,
)
from config.settings import SlackSettings

NO_WAIT = HttpClientConfig(max_retries=1, backoff_base_seconds=0.0, backoff_max_seconds=0.0)


def _client(handler) -> SlackClient:
    return SlackClient(
        "xoxb-test",
        NO_WAIT,
        base_url="https://slack.test/api",
        transport=httpx.MockTransport(handler),
    )


def test_build_http_config_maps_retry_settings() -> None:
    """Settings de retry viram HttpClientConfig."""
    settings = SlackSettings(
        retry_max=5,
        retry_wait_min_seconds=2.0,
        retry_wait_max_seconds=20.0,
        read_timeout_seconds=7.0,
    )

    config = build_http_config(settings)

    assert config.max_retries == 5
    assert config.backoff_base_seconds == 2.0
    assert config.backoff_max_seconds == 20.0
    assert config.timeout_seconds == 7.0


class TestPostMessage:
    """Testes de chat.postMessage."""

    @pytest.mark.asyncio
    async def test_injects_channel_and_bearer(self) -> None:
        """Payload recebe channel e a chamada leva Bearer token."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        result = await _client(handler).post_message("C1", "general", {"text": "hi"})

        assert isinstance(result, PostOk)
        assert seen["url"] == "https://slack.test/api/chat.postMessage"
        assert seen["auth"] == "Bearer xoxb-test"
        assert seen["body"] == {"text": "hi", "channel": "C1"}

    @pytest.mark.asyncio
    async def test_ok_false_is_rejected(self) -> None:
        """ok=false vira PostRejected com o motivo do Slack."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": False, "error": "channel_not_found"})

        result = await _client(handler).post_message("C1", "general", {"text": "hi"})

        assert result == PostRejected(
            reason="channel_not_found", channel_id="C1", channel_name="general"
        )

    @pytest.mark.asyncio
    async def test_persistent_server_error(self) -> None:
        """5xx após retries vira PostServerError com status e corpo."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        result = await _client(handler).post_message("C1", "general", {"text": "hi"})

        assert result == PostServerError(status_code=502, body="bad gateway")

    @pytest.mark.asyncio
    async def test_client_error_status(self) -> None:
        """Status 4xx não retentável vira PostServerError com o status."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text="forbidden")

        result = await _client(handler).post_message("C1", "general", {"text": "hi"})

        assert result == PostServerError(status_code=403, body="forbidden")

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        """Timeout após retries vira PostTimeout."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        result = await _client(handler).post_message("C1", "general", {"text": "hi"})

        assert isinstance(result, PostTimeout)

    @pytest.mark.asyncio
    async def test_connection_failure_raises(self) -> None:
        """Falha de conexão persistente levanta SlackApiError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SlackApiError):
            await _client(handler).post_message("C1", "general", {"text": "hi"})


class TestConversations:
    """Testes de conversations.list e conversations.info."""

    @pytest.mark.asyncio
    async def test_list_channels_follows_cursor(self) -> None:
        """Paginação segue next_cursor e inclui arquivados."""
        seen_params: list[dict[str, str]] = []
        pages = {
            "": {
                "ok": True,
                "channels": [{"id": "C1", "name": "general", "is_channel": True}],
                "response_metadata": {"next_cursor": "page2"},
            },
            "page2": {
                "ok": True,
                "channels": [
                    {"id": "C2", "name": "old", "is_channel": True, "is_archived": True},
                    {"id": "G1", "name": "secret", "is_private": True},
                ],
                "response_metadata": {"next_cursor": ""},
            },
        }

        def handler(request: httpx.Request) -> httpx.Response:
            params = dict(request.url.params)
            seen_params.append(params)
            return httpx.Response(200, json=pages[params.get("cursor", "")])

        channels = await _client(handler).list_channels()

        assert [c.id for c in channels] == ["C1", "C2", "G1"]
        assert channels[1].is_archived is True
        assert channels[2].is_group is True
        assert seen_params[0]["exclude_archived"] == "false"
        assert seen_params[0]["types"] == "public_channel,private_channel"
        assert seen_params[0]["limit"] == "200"
        assert seen_params[1]["cursor"] == "page2"

    @pytest.mark.asyncio
    async def test_list_channels_error(self) -> None:
        """ok=false em conversations.list levanta SlackApiError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": False, "error": "invalid_auth"})

        with pytest.raises(SlackApiError) as exc_info:
            await _client(handler).list_channels()

        assert exc_info.value.error_code == "invalid_auth"

    @pytest.mark.asyncio
    async def test_get_channel(self) -> None:
        """conversations.info devolve Channel."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["channel"] == "C1"
            return httpx.Response(
                200, json={"ok": True, "channel": {"id": "C1", "name": "general", "is_channel": True}}
            )

        channel = await _client(handler).get_channel("C1")

        assert channel is not None
        assert channel.name == "general"
        assert channel.is_channel is True

    @pytest.mark.asyncio
    async def test_get_channel_not_found_returns_none(self) -> None:
        """channel_not_found → None."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"ok": False, "error": "channel_not_found"})

        assert await _client(handler).get_channel("C404") is None
