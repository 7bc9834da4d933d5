"""Verificação de assinatura de requests enviados pelo Slack.

Base string: ``v0:<X-Slack-Request-Timestamp>:<corpo bruto>``.
Assinatura esperada: ``v0=`` + HMAC-SHA256 hex com o signing secret.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

SIGNATURE_VERSION = "v0"
SIGNATURE_HEADER = "x-slack-signature"
TIMESTAMP_HEADER = "x-slack-request-timestamp"
# Janela de tolerância contra replay
MAX_TIMESTAMP_SKEW_SECONDS = 60 * 5


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação; error vem preenchido quando inválida."""

    valid: bool
    error: str | None = None


def compute_slack_signature(secret: str, timestamp: str, raw_body: bytes) -> str:
    """Calcula assinatura v0 para o corpo e timestamp informados."""
    base = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + raw_body
    digest = hmac.new(secret.encode(), base, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    signing_secret: str | None,
    now: float | None = None,
) -> SignatureResult:
    """Valida assinatura de um request do Slack.

    Args:
        raw_body: Corpo bruto do request
        headers: Headers recebidos (chaves case-insensitive ou minúsculas)
        signing_secret: Signing secret do app
        now: Epoch atual em segundos (injetável em testes)

    Returns:
        SignatureResult
    """
    if not signing_secret:
        return SignatureResult(valid=False, error="signing_secret_not_configured")

    given = headers.get(SIGNATURE_HEADER)
    if not given:
        logger.info("slack_signature_missing")
        return SignatureResult(valid=False, error="missing_signature")

    timestamp = headers.get(TIMESTAMP_HEADER)
    if not timestamp:
        logger.info("slack_timestamp_missing")
        return SignatureResult(valid=False, error="missing_timestamp")

    try:
        ts_value = int(timestamp)
    except ValueError:
        logger.info("slack_timestamp_invalid")
        return SignatureResult(valid=False, error="invalid_timestamp")

    current = int(time.time() if now is None else now)
    skew = abs(current - ts_value)
    if skew > MAX_TIMESTAMP_SKEW_SECONDS:
        logger.info("slack_timestamp_expired", extra={"skew_seconds": skew})
        return SignatureResult(valid=False, error="expired_timestamp")

    expected = compute_slack_signature(signing_secret, timestamp, raw_body)
    if not hmac.compare_digest(given.encode(), expected.encode()):
        logger.info("slack_signature_mismatch")
        return SignatureResult(valid=False, error="signature_mismatch")

    return SignatureResult(valid=True)
