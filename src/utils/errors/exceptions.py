"""Exceções de infraestrutura compartilhadas entre adapters."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura."""


class SecretResolutionError(InfrastructureError):
    """Falha ao resolver referência de secret (gsm://) no ambiente."""
