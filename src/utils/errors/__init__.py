"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    InfrastructureError,
    SecretResolutionError,
)

__all__ = [
    "InfrastructureError",
    "SecretResolutionError",
]
