"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (relay, slash commands, health)
- Validação inicial de request (headers, assinatura)
- Delegação para connectors/use_cases
- Respostas HTTP apropriadas

Estrutura:
- routes/slack/: relay de webhooks e slash commands
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
