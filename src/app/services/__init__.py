"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/ e api/connectors/.
"""

from app.services.reconciliation import ReconciliationReport, ReconciliationService
from app.services.token_service import TokenGenerationError, TokenService

__all__ = [
    "ReconciliationReport",
    "ReconciliationService",
    "TokenGenerationError",
    "TokenService",
]
