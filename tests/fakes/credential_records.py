"""Builders de CredentialRecord para testes."""

from __future__ import annotations

from app.domain.credential import CredentialRecord

DEFAULT_CREATED_AT = "2024-01-02T03:04:05.123456789Z"


def make_record(
    channel_name: str = "alerts",
    channel_id: str = "C001",
    token: str = "a" * 32,
    version: int = 1,
    created_at: str = DEFAULT_CREATED_AT,
) -> CredentialRecord:
    return CredentialRecord(
        channel_name=channel_name,
        channel_id=channel_id,
        token=token,
        version=version,
        created_at=created_at,
    )
