"""Resolução de referências a secrets em variáveis de ambiente.

Qualquer variável cujo valor tenha a forma ``gsm://<secret-id>`` é
substituída pelo valor do secret no Secret Manager antes das settings
serem carregadas. Assim o deploy declara SLACK_TOKEN=gsm://slack-token
sem expor o valor na configuração do serviço.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from app.infra.secrets.gcp_secrets import get_secret
from utils.errors import SecretResolutionError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, MutableMapping

logger = logging.getLogger(__name__)

SECRET_REF_PREFIX = "gsm://"


def resolve_secret_references(
    environ: Mapping[str, str],
    fetch: Callable[[str], str] = get_secret,
) -> dict[str, str]:
    """Retorna cópia do ambiente com referências gsm:// resolvidas.

    Args:
        environ: Variáveis de ambiente originais.
        fetch: Função que lê um secret pelo id.

    Raises:
        SecretResolutionError: Referência vazia ou secret inacessível.
    """
    resolved = dict(environ)
    refs = {
        key: value.removeprefix(SECRET_REF_PREFIX)
        for key, value in environ.items()
        if value.startswith(SECRET_REF_PREFIX)
    }
    if not refs:
        return resolved

    logger.info("secret_refs_resolving", extra={"keys": sorted(refs)})
    for key, secret_id in refs.items():
        if not secret_id:
            raise SecretResolutionError(f"Referência de secret vazia em {key}")
        resolved[key] = fetch(secret_id)
    return resolved


def apply_secret_references(
    environ: MutableMapping[str, str] | None = None,
    fetch: Callable[[str], str] = get_secret,
) -> list[str]:
    """Resolve referências gsm:// in-place (default: os.environ).

    Returns:
        Nomes das variáveis substituídas.
    """
    target = os.environ if environ is None else environ
    resolved = resolve_secret_references(target, fetch)
    replaced = [key for key, value in resolved.items() if target.get(key) != value]
    for key in replaced:
        target[key] = resolved[key]
    return replaced
