"""Testes dos modelos de domínio de credenciais."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from app.domain.credential import (
    CredentialRecord,
    format_created_at,
    parse_created_at,
    record_to_entry,
    sort_by_version,
)
from tests.fakes.credential_records import make_record


class TestCreatedAt:
    """Testes de formatação/parse de created_at (RFC 3339 nano)."""

    def test_format_keeps_nanoseconds_and_trims_zeros(self) -> None:
        """Deve manter nanossegundos e remover zeros à direita."""
        epoch_ns = 1_704_164_645_500_000_000  # 2024-01-02T03:04:05.5Z

        assert format_created_at(epoch_ns) == "2024-01-02T03:04:05.5Z"

    def test_format_without_fraction(self) -> None:
        """Instante em segundo cheio não leva fração."""
        assert format_created_at(1_704_164_645_000_000_000) == "2024-01-02T03:04:05Z"

    def test_parse_truncates_to_microseconds(self) -> None:
        """Dígitos abaixo de microssegundo são truncados."""
        parsed = parse_created_at("2024-01-02T03:04:05.123456789Z")

        assert parsed == datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=UTC)

    def test_parse_converts_offset_to_utc(self) -> None:
        """Offset explícito deve ser convertido para UTC."""
        parsed = parse_created_at("2024-01-02T12:04:05+09:00")

        assert parsed == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_parse_roundtrips_formatted_value(self) -> None:
        """Valor gerado por format_created_at deve ser legível."""
        value = format_created_at()

        assert parse_created_at(value).tzinfo is not None

    @pytest.mark.parametrize("value", ["", "2024-01-02", "2024-01-02 03:04:05Z", "garbage"])
    def test_parse_rejects_invalid(self, value: str) -> None:
        """Formato fora de RFC 3339 deve levantar ValueError."""
        with pytest.raises(ValueError):
            parse_created_at(value)


class TestCredentialRecord:
    """Testes de serialização de CredentialRecord."""

    def test_from_dict_restores_to_dict(self) -> None:
        """from_dict(to_dict()) preserva todos os campos."""
        record = make_record(version=1)

        assert CredentialRecord.from_dict(record.to_dict()) == record

    def test_from_dict_coerces_version(self) -> None:
        """version armazenada como string vira int."""
        data = make_record().to_dict() | {"version": "3"}

        assert CredentialRecord.from_dict(data).version == 3

    def test_from_dict_missing_field_raises(self) -> None:
        """Campo obrigatório ausente levanta KeyError."""
        data = make_record().to_dict()
        del data["token"]

        with pytest.raises(KeyError):
            CredentialRecord.from_dict(data)


def test_record_to_entry_hides_channel_id() -> None:
    """Entry expõe token, version e created_at parseado."""
    entry = record_to_entry(make_record(token="t1", version=0))

    assert entry.token == "t1"
    assert entry.version == 0
    assert entry.created_at.year == 2024
    assert not hasattr(entry, "channel_id")


def test_sort_by_version_ignores_store_order() -> None:
    """Ordenação é explícita, independente da ordem do store."""
    records = [make_record(version=1), make_record(version=0)]

    assert [r.version for r in sort_by_version(records)] == [0, 1]
