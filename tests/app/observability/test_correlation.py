"""Testes do correlation_id por contexto."""

from __future__ import annotations

from app.observability.correlation import (
    correlation_id_from_headers,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)


class TestCorrelationIdFromHeaders:
    """Origem do correlation_id a partir dos headers."""

    def test_explicit_header_wins(self) -> None:
        headers = {
            "x-correlation-id": " req-123 ",
            "x-cloud-trace-context": "abc/1;o=1",
        }

        assert correlation_id_from_headers(headers) == "req-123"

    def test_cloud_trace_id_is_used(self) -> None:
        """Usa só o trace id de TRACE_ID/SPAN_ID;o=1."""
        headers = {"x-cloud-trace-context": "105445aa7843bc8bf206b1200/1;o=1"}

        assert correlation_id_from_headers(headers) == "105445aa7843bc8bf206b1200"

    def test_no_headers(self) -> None:
        assert correlation_id_from_headers({}) is None
        assert correlation_id_from_headers({"x-correlation-id": "  "}) is None


def test_set_and_reset_restore_previous_value() -> None:
    """reset devolve o valor anterior ao set."""
    outer = set_correlation_id("outer")
    inner = set_correlation_id(None)
    generated = get_correlation_id()

    assert generated
    assert generated != "outer"

    reset_correlation_id(inner)
    assert get_correlation_id() == "outer"
    reset_correlation_id(outer)
