"""Conector Slack - adapter de borda para a Web API do Slack.

Este módulo é o único ponto de IO para o Slack.
Responsabilidades:
- HTTP client (chat.postMessage, conversations.list, conversations.info)
- Verificação de assinatura de requests
- Parse de slash commands
- Parse do corpo de webhooks legados (JSON ou form com payload)
"""

from .errors import SlackApiError
from .http_client import SlackClient, build_http_config
from .signature import SignatureResult, compute_slack_signature, verify_slack_signature
from .slash_command import SlashCommandParseError, SlashCommandRequest, parse_slash_command
from .webhook_payload import InvalidPayloadError, parse_webhook_body

__all__ = [
    "InvalidPayloadError",
    "SignatureResult",
    "SlackApiError",
    "SlackClient",
    "SlashCommandParseError",
    "SlashCommandRequest",
    "build_http_config",
    "compute_slack_signature",
    "parse_slash_command",
    "parse_webhook_body",
    "verify_slack_signature",
]
