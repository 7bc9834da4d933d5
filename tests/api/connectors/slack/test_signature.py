"""Testes da verificação de assinatura de requests do Slack."""

from __future__ import annotations

import pytest

from api.connectors.slack import compute_slack_signature, verify_slack_signature

SECRET = "8f742231b10e8888abcd99yyyzzz85a5"
NOW = 1_531_420_618
BODY = b"token=xyz&command=%2Frelay-show&channel_id=C1&channel_name=general"


def _headers(signature: str | None = None, timestamp: str | None = str(NOW)) -> dict[str, str]:
    headers: dict[str, str] = {}
    if timestamp is not None:
        headers["x-slack-request-timestamp"] = timestamp
    headers["x-slack-signature"] = (
        signature
        if signature is not None
        else compute_slack_signature(SECRET, timestamp or "", BODY)
    )
    return headers


def test_compute_signature_format() -> None:
    """Assinatura tem prefixo v0= e 64 hex."""
    signature = compute_slack_signature(SECRET, str(NOW), BODY)

    assert signature.startswith("v0=")
    assert len(signature) == 3 + 64


def test_valid_signature() -> None:
    """Assinatura correta dentro da janela é válida."""
    result = verify_slack_signature(BODY, _headers(), SECRET, now=NOW + 10)

    assert result.valid is True
    assert result.error is None


def test_tampered_body_is_rejected() -> None:
    """Corpo alterado invalida a assinatura."""
    result = verify_slack_signature(BODY + b"x", _headers(), SECRET, now=NOW)

    assert result.valid is False
    assert result.error == "signature_mismatch"


def test_expired_timestamp_is_rejected() -> None:
    """Timestamp fora da janela de 5 minutos é recusado."""
    result = verify_slack_signature(BODY, _headers(), SECRET, now=NOW + 301)

    assert result.error == "expired_timestamp"


@pytest.mark.parametrize(
    ("headers", "secret", "error"),
    [
        ({}, "", "signing_secret_not_configured"),
        ({"x-slack-request-timestamp": str(NOW)}, SECRET, "missing_signature"),
        ({"x-slack-signature": "v0=abc"}, SECRET, "missing_timestamp"),
        (
            {"x-slack-signature": "v0=abc", "x-slack-request-timestamp": "soon"},
            SECRET,
            "invalid_timestamp",
        ),
    ],
)
def test_invalid_inputs(headers: dict[str, str], secret: str, error: str) -> None:
    """Cada falha de entrada tem seu código de erro."""
    result = verify_slack_signature(BODY, headers, secret, now=NOW)

    assert result.valid is False
    assert result.error == error
