"""Modelos de domínio para credenciais de webhook por canal.

Um CredentialRecord liga um token opaco a um canal do Slack. Cada
channel_name tem no máximo dois registros vivos (original e rotação),
distinguidos por version. Registros são imutáveis: só nascem e morrem.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone
from typing import Any

# Teto de registros por channel_name (original + rotação)
MAX_TOKEN_COUNT = 2

_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d{1,9}))?"
    r"(?P<tz>Z|z|[+-]\d{2}:\d{2})$"
)


@dataclass(frozen=True, slots=True)
class CredentialRecord:
    """Unidade persistida: um token ligado a (channel_name, version)."""

    channel_name: str
    channel_id: str
    token: str
    version: int
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        """Serializa registro para persistência."""
        return {
            "channel_name": self.channel_name,
            "channel_id": self.channel_id,
            "token": self.token,
            "version": self.version,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CredentialRecord:
        """Deserializa registro de persistência.

        Raises:
            KeyError: Campo obrigatório ausente.
            ValueError: version não numérica.
        """
        return cls(
            channel_name=str(data["channel_name"]),
            channel_id=str(data["channel_id"]),
            token=str(data["token"]),
            version=int(data["version"]),
            created_at=str(data.get("created_at", "")),
        )


@dataclass(frozen=True, slots=True)
class Entry:
    """Visão pública de um registro (sem o channel_id)."""

    token: str
    version: int
    created_at: datetime


def format_created_at(epoch_ns: int | None = None) -> str:
    """Formata instante em RFC 3339 UTC com precisão de nanossegundos.

    Zeros à direita da fração são removidos (ex: 2024-01-02T03:04:05.5Z).
    """
    if epoch_ns is None:
        epoch_ns = time.time_ns()
    seconds, nanos = divmod(epoch_ns, 1_000_000_000)
    base = datetime.fromtimestamp(seconds, tz=UTC).strftime("%Y-%m-%dT%H:%M:%S")
    if nanos == 0:
        return f"{base}Z"
    frac = f"{nanos:09d}".rstrip("0")
    return f"{base}.{frac}Z"


def parse_created_at(value: str) -> datetime:
    """Converte created_at armazenado em datetime UTC.

    Aceita de 0 a 9 dígitos fracionários; dígitos abaixo de microssegundo
    são truncados.

    Raises:
        ValueError: Se o valor não for RFC 3339 válido.
    """
    match = _RFC3339_RE.match(value)
    if match is None:
        raise ValueError(f"created_at fora do formato RFC 3339: {value!r}")

    frac = (match.group("frac") or "")[:6].ljust(6, "0")
    parsed = datetime.strptime(match.group("base"), "%Y-%m-%dT%H:%M:%S")
    parsed = parsed.replace(microsecond=int(frac))

    tz = match.group("tz")
    if tz in ("Z", "z"):
        offset = timezone.utc
    else:
        sign = 1 if tz[0] == "+" else -1
        hours, minutes = int(tz[1:3]), int(tz[4:6])
        offset = timezone(sign * timedelta(hours=hours, minutes=minutes))

    return parsed.replace(tzinfo=offset).astimezone(UTC)


def record_to_entry(record: CredentialRecord) -> Entry:
    """Mapeia registro persistido para Entry pública.

    Raises:
        ValueError: Se created_at estiver corrompido.
    """
    return Entry(
        token=record.token,
        version=record.version,
        created_at=parse_created_at(record.created_at),
    )


def sort_by_version(records: list[CredentialRecord]) -> list[CredentialRecord]:
    """Ordena registros por version ascendente (não confia no store)."""
    return sorted(records, key=lambda r: r.version)


__all__ = [
    "MAX_TOKEN_COUNT",
    "CredentialRecord",
    "Entry",
    "format_created_at",
    "parse_created_at",
    "record_to_entry",
    "sort_by_version",
]
