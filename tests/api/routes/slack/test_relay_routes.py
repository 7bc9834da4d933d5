"""Testes HTTP do relay (/p/...) e dos slash commands (/slash/)."""

from __future__ import annotations

import time
from unittest.mock import AsyncMock
from urllib.parse import urlencode

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.connectors.slack import compute_slack_signature
from api.middleware import AccessLogMiddleware
from api.routes import create_api_router
from app.bootstrap import get_relay_webhook_use_case, get_slash_command_use_case
from app.infra.stores import MemoryCredentialStore
from app.protocols.channel_directory import Channel
from app.protocols.credential_store import CredentialStoreError
from app.services.token_service import TokenService
from app.use_cases.relay_webhook import RelayWebhookUseCase
from app.use_cases.slash_command import SlashCommandUseCase
from config.settings import SlackSettings, get_slack_settings
from tests.fakes.credential_records import make_record
from tests.fakes.fake_channel_directory import FakeChannelDirectory

TOKEN = "c" * 32
SECRET = "signing-secret"


@pytest.fixture
def directory() -> FakeChannelDirectory:
    return FakeChannelDirectory(channels=[Channel(id="C1", name="general")])


@pytest.fixture
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore([make_record("general", "C1", TOKEN)])


@pytest.fixture
def client(store: MemoryCredentialStore, directory: FakeChannelDirectory) -> TestClient:
    token_service = TokenService(store)
    app = FastAPI()
    app.add_middleware(AccessLogMiddleware)
    app.include_router(create_api_router())
    app.dependency_overrides[get_relay_webhook_use_case] = lambda: RelayWebhookUseCase(
        token_service=token_service, directory=directory
    )
    app.dependency_overrides[get_slash_command_use_case] = lambda: SlashCommandUseCase(
        token_service=token_service, directory=directory
    )
    app.dependency_overrides[get_slack_settings] = lambda: SlackSettings(signing_secret=SECRET)
    return TestClient(app, base_url="http://relay.test")


def _signed_headers(body: bytes, secret: str = SECRET) -> dict[str, str]:
    timestamp = str(int(time.time()))
    return {
        "content-type": "application/x-www-form-urlencoded",
        "x-slack-request-timestamp": timestamp,
        "x-slack-signature": compute_slack_signature(secret, timestamp, body),
    }


class TestRelayRoute:
    """Testes de POST /p/{channel_name}/{token}/."""

    @pytest.mark.parametrize("suffix", ["/", ""])
    def test_relay_ok_with_or_without_trailing_slash(
        self, client: TestClient, directory: FakeChannelDirectory, suffix: str
    ) -> None:
        """Relay aceita a URL com ou sem barra final."""
        response = client.post(f"/p/general/{TOKEN}{suffix}", json={"text": "hi"})

        assert response.status_code == 200
        assert response.text == "ok.\n"
        assert response.headers["content-type"].startswith("text/plain")
        assert directory.posted[0].payload == {"text": "hi"}

    def test_responses_are_not_cacheable(self, client: TestClient) -> None:
        """Toda resposta leva cache-control no-store."""
        response = client.post(f"/p/general/{TOKEN}/", json={"text": "hi"})

        assert response.headers["cache-control"] == "no-store, no-cache"
        assert response.headers["x-correlation-id"]

    def test_wrong_token(self, client: TestClient) -> None:
        """Token inválido → 401 texto puro."""
        response = client.post("/p/general/wrong/", json={"text": "hi"})

        assert response.status_code == 401

    def test_not_generated(self, client: TestClient) -> None:
        """Canal sem token → 404."""
        response = client.post(f"/p/random/{TOKEN}/", json={"text": "hi"})

        assert response.status_code == 404
        assert response.text.startswith("No token generated for random")

    def test_get_not_allowed(self, client: TestClient) -> None:
        """Métodos diferentes de POST → 405."""
        assert client.get(f"/p/general/{TOKEN}/").status_code == 405

    def test_store_failure_is_500(self, client: TestClient, store) -> None:
        """Falha de dependência vira 500 logado."""
        store.query_by_name = AsyncMock(side_effect=CredentialStoreError("down"))

        response = client.post(f"/p/general/{TOKEN}/", json={"text": "hi"})

        assert response.status_code == 500
        assert response.text == "Internal server error.\n"

    @pytest.mark.parametrize(
        "path",
        ["/p/general/", "/p/general/tok/extra/", "/p//tok/", "/p/general"],
    )
    def test_malformed_path_is_bad_request(
        self, client: TestClient, directory: FakeChannelDirectory, path: str
    ) -> None:
        """Caminho /p/ fora do formato canal/token → 400 texto puro."""
        response = client.post(path, json={"text": "hi"})

        assert response.status_code == 400
        assert response.text == "Invalid request path\n"
        assert response.headers["content-type"].startswith("text/plain")
        assert directory.posted == []


class TestSlashRoute:
    """Testes de POST /slash/."""

    def test_signed_command(self, client: TestClient) -> None:
        """Comando assinado é executado e responde in_channel."""
        body = urlencode(
            {"command": "/relay-show", "channel_id": "C1", "channel_name": "general"}
        ).encode()

        response = client.post("/slash/", content=body, headers=_signed_headers(body))

        assert response.status_code == 200
        payload = response.json()
        assert payload["response_type"] == "in_channel"
        assert f"https://relay.test/p/general/{TOKEN}/" in payload["text"]

    def test_invalid_signature(self, client: TestClient) -> None:
        """Assinatura com outro secret → 401."""
        body = b"command=%2Frelay-show&channel_id=C1&channel_name=general"

        response = client.post("/slash/", content=body, headers=_signed_headers(body, "other"))

        assert response.status_code == 401

    def test_missing_fields(self, client: TestClient) -> None:
        """Corpo assinado sem campos obrigatórios → 400."""
        body = b"command=%2Frelay-show"

        response = client.post("/slash/", content=body, headers=_signed_headers(body))

        assert response.status_code == 400
