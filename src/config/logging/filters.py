"""Filters de logging: contexto da requisição e máscara de credenciais.

Campos injetados:
- correlation_id: ID de rastreamento da requisição
- service: Nome do serviço (ex: webhook_relay)

Campos mascarados (quando vierem em ``extra``):
- token / given_token / saved_token: tokens de webhook são credenciais
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# Quantidade de caracteres do token preservados nos logs
TOKEN_VISIBLE_CHARS = 4

SENSITIVE_FIELDS = ("token", "given_token", "saved_token")


def mask_token(token: str) -> str:
    """Mascara token de webhook para uso em logs.

    Preserva apenas os primeiros caracteres, suficiente para correlacionar
    com o que o operador vê no Slack sem expor a credencial. Aplicar duas
    vezes dá o mesmo resultado.

    Exemplo:
        mask_token("0123456789abcdef") -> "0123************"
    """
    if len(token) <= TOKEN_VISIBLE_CHARS:
        return "*" * len(token)
    return token[:TOKEN_VISIBLE_CHARS] + "*" * (len(token) - TOKEN_VISIBLE_CHARS)


class CorrelationIdFilter(logging.Filter):
    """Enriquece cada record com correlation_id/service e mascara tokens.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Sem getter, usa string vazia.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Nunca descarta o record; só acrescenta e mascara campos.

        correlation_id passado via ``extra`` tem precedência sobre o getter.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name

        for field in SENSITIVE_FIELDS:
            value = getattr(record, field, None)
            if isinstance(value, str):
                setattr(record, field, mask_token(value))
        return True
