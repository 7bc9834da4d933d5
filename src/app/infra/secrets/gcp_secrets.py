"""GCP Secret Manager — integração com Google Cloud Secret Manager.

Provedor de secrets para staging/production.
Suporta cache em memória para evitar chamadas repetidas.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import TYPE_CHECKING

from google.api_core import exceptions as gcp_exceptions

from utils.errors import SecretResolutionError

if TYPE_CHECKING:
    from google.cloud.secretmanager import SecretManagerServiceClient

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_client() -> SecretManagerServiceClient:
    """Obtém cliente do Secret Manager (singleton via lru_cache)."""
    from google.cloud import secretmanager
    return secretmanager.SecretManagerServiceClient()


@lru_cache(maxsize=64)
def get_secret(
    secret_id: str,
    project_id: str | None = None,
    version: str = "latest",
) -> str:
    """Obtém valor de secret do GCP Secret Manager.

    Args:
        secret_id: ID do secret (ex.: slack-token-production)
        project_id: ID do projeto GCP (default: env GCP_PROJECT)
        version: Versão do secret (default: latest)

    Returns:
        Valor do secret como string

    Raises:
        ValueError: Se project_id não fornecido e GCP_PROJECT não definido
        SecretResolutionError: Se o secret não puder ser lido
    """
    if project_id is None:
        project_id = os.getenv("GCP_PROJECT")
        if not project_id:
            msg = "GCP_PROJECT não definido e project_id não fornecido"
            raise ValueError(msg)

    client = _get_client()
    name = f"projects/{project_id}/secrets/{secret_id}/versions/{version}"

    try:
        response = client.access_secret_version(request={"name": name})
    except gcp_exceptions.GoogleAPICallError as e:
        logger.error("secret_load_error", extra={"secret_id": secret_id, "error": str(e)})
        raise SecretResolutionError(f"Falha ao ler secret: {secret_id}") from e

    logger.debug("secret_loaded", extra={"secret_id": secret_id})
    return response.payload.data.decode("UTF-8")

