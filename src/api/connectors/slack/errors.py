"""Erros da Web API do Slack."""

from __future__ import annotations


class SlackApiError(Exception):
    """Falha ao falar com a Web API do Slack (transporte ou ok=false).

    Attributes:
        method: Método da API (ex: conversations.list)
        error_code: Campo "error" devolvido pelo Slack, quando houver
    """

    def __init__(self, message: str, method: str = "", error_code: str = "") -> None:
        super().__init__(message)
        self.method = method
        self.error_code = error_code
