"""Testes do parse de corpo de webhooks legados."""

from __future__ import annotations

from urllib.parse import urlencode

import pytest

from api.connectors.slack import InvalidPayloadError, parse_webhook_body

FORM = "application/x-www-form-urlencoded"


def test_json_body() -> None:
    """Corpo JSON vira dict."""
    assert parse_webhook_body(b'{"text": "hi"}', "application/json") == {"text": "hi"}


def test_json_without_content_type() -> None:
    """Sem content-type, corpo é tratado como JSON."""
    assert parse_webhook_body(b'{"text": "hi"}', None) == {"text": "hi"}


def test_form_payload_field() -> None:
    """Form com campo payload é extraído."""
    body = urlencode({"payload": '{"text": "a=b & c"}'}).encode()

    assert parse_webhook_body(body, f"{FORM}; charset=utf-8") == {"text": "a=b & c"}


def test_raw_json_under_form_content_type() -> None:
    """JSON cru com content-type de form ainda é aceito."""
    assert parse_webhook_body(b'{"text": "hi"}', FORM) == {"text": "hi"}


def test_duplicated_payload_field_rejected() -> None:
    """Mais de um campo payload é inválido."""
    body = b"payload=%7B%7D&payload=%7B%7D"

    with pytest.raises(InvalidPayloadError):
        parse_webhook_body(body, FORM)


@pytest.mark.parametrize("body", [b"not json", b"[1, 2]", b'"text"', b""])
def test_invalid_bodies(body: bytes) -> None:
    """JSON inválido ou não-objeto levanta InvalidPayloadError."""
    with pytest.raises(InvalidPayloadError):
        parse_webhook_body(body, "application/json")
