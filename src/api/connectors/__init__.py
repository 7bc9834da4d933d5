"""Connectors — adapters de borda para APIs externas.

Estrutura:
- slack/: Web API (conversations.list, chat.postMessage), assinatura
  de requests e parsing de slash commands/webhooks legados
"""

__all__: list[str] = []
