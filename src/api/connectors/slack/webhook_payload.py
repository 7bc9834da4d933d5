"""Parse do corpo de webhooks no formato legado do Slack.

Webhooks legados aceitam tanto ``application/json`` quanto
``application/x-www-form-urlencoded`` com o JSON no campo ``payload``.
Clientes antigos mandam JSON cru mesmo com content-type de formulário,
então esse caso também é aceito.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qs

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class InvalidPayloadError(ValueError):
    """Corpo do webhook não é um objeto JSON válido."""


def _extract_form_payload(raw_body: bytes) -> bytes:
    try:
        fields = parse_qs(
            raw_body.decode("utf-8"),
            keep_blank_values=True,
            strict_parsing=True,
        )
    except (UnicodeDecodeError, ValueError):
        # Não é formulário válido; tenta como JSON cru
        return raw_body

    values = fields.get("payload")
    if values is None:
        return raw_body
    if len(values) != 1:
        raise InvalidPayloadError(
            f"form field 'payload' must be a single value: len={len(values)}"
        )
    return values[0].encode("utf-8")


def parse_webhook_body(raw_body: bytes, content_type: str | None) -> dict[str, Any]:
    """Extrai o payload JSON do corpo do webhook.

    Args:
        raw_body: Corpo bruto do request
        content_type: Header Content-Type (pode conter charset)

    Raises:
        InvalidPayloadError: JSON inválido, não-objeto, ou payload duplicado.
    """
    body = raw_body
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type == FORM_CONTENT_TYPE:
        body = _extract_form_payload(raw_body)

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPayloadError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidPayloadError("payload_not_object")
    return payload
