"""Secrets — integração com provedores de segredos.

Módulos disponíveis:
    - gcp_secrets: Integração com Google Cloud Secret Manager
    - env_references: Resolução de valores gsm:// no ambiente
"""

from __future__ import annotations

from app.infra.secrets.env_references import (
    SECRET_REF_PREFIX,
    apply_secret_references,
    resolve_secret_references,
)
from app.infra.secrets.gcp_secrets import get_secret

__all__ = [
    "SECRET_REF_PREFIX",
    "apply_secret_references",
    "get_secret",
    "resolve_secret_references",
]
