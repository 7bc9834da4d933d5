"""Settings específicas do Slack.

Credenciais do bot, canal de operações e configuração de retry
para chamadas à Web API (chat.postMessage, conversations.*).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

SLACK_API_BASE_URL: str = "https://slack.com/api"


@dataclass(frozen=True)
class SlackSettings:
    """Configurações do Slack.

    Attributes:
        bot_token: Token do bot (xoxb-...) usado como Bearer
        signing_secret: Secret para validar assinatura de slash commands
        api_base_url: URL base da Web API
        ops_channel_name: Canal que recebe as notificações de reconciliação
        custom_domain_name: Domínio público usado nas URLs de webhook
        retry_max: Máximo de retries por chamada
        retry_wait_min_seconds: Backoff inicial
        retry_wait_max_seconds: Teto do backoff
        read_timeout_seconds: Timeout de cada tentativa
    """

    # Credenciais (carregadas de env ou Secret Manager)
    bot_token: str = ""
    signing_secret: str = ""

    # API
    api_base_url: str = SLACK_API_BASE_URL

    # Operação
    ops_channel_name: str = ""
    custom_domain_name: str = ""

    # Retry
    retry_max: int = 3
    retry_wait_min_seconds: float = 1.0
    retry_wait_max_seconds: float = 10.0
    read_timeout_seconds: float = 5.0

    def validate(self) -> list[str]:
        """Valida configurações mínimas do Slack.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.bot_token:
            errors.append("SLACK_TOKEN não configurado")

        if not self.signing_secret:
            errors.append("SLACK_SIGNING_SECRET não configurado")

        if not self.ops_channel_name:
            errors.append("OPS_NOTIFICATION_CHANNEL_NAME não configurado")

        if self.retry_max < 0:
            errors.append("RETRY_MAX deve ser >= 0")

        if self.retry_wait_min_seconds < 0:
            errors.append("RETRY_WAIT_MIN_SECONDS deve ser >= 0")

        if self.retry_wait_max_seconds < self.retry_wait_min_seconds:
            errors.append("RETRY_WAIT_MAX_SECONDS deve ser >= RETRY_WAIT_MIN_SECONDS")

        if self.read_timeout_seconds <= 0:
            errors.append("RETRY_READ_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_from_env() -> SlackSettings:
    """Carrega SlackSettings a partir de variáveis de ambiente."""
    return SlackSettings(
        bot_token=os.getenv("SLACK_TOKEN", ""),
        signing_secret=os.getenv("SLACK_SIGNING_SECRET", ""),
        api_base_url=os.getenv("SLACK_API_BASE_URL", SLACK_API_BASE_URL).rstrip("/"),
        ops_channel_name=os.getenv("OPS_NOTIFICATION_CHANNEL_NAME", ""),
        custom_domain_name=os.getenv("CUSTOM_DOMAIN_NAME", ""),
        retry_max=int(os.getenv("RETRY_MAX", "3")),
        retry_wait_min_seconds=float(os.getenv("RETRY_WAIT_MIN_SECONDS", "1")),
        retry_wait_max_seconds=float(os.getenv("RETRY_WAIT_MAX_SECONDS", "10")),
        read_timeout_seconds=float(os.getenv("RETRY_READ_TIMEOUT_SECONDS", "5")),
    )


@lru_cache(maxsize=1)
def get_slack_settings() -> SlackSettings:
    """Retorna instância cacheada de SlackSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
