"""Job de reconciliação entre credenciais armazenadas e canais do Slack.

Uma passada por execução: o scheduler (Cloud Scheduler/cron) decide a
frequência. Falhas são logadas e propagadas para o chamador.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.observability import record_latency, record_reconciliation, set_correlation_id

if TYPE_CHECKING:
    from app.services import ReconciliationReport, ReconciliationService

logger = logging.getLogger(__name__)


async def run_reconciliation(
    deadline_seconds: float | None = None,
    service: ReconciliationService | None = None,
) -> ReconciliationReport:
    """Executa uma passada de reconciliação.

    Args:
        deadline_seconds: Prazo total da passada; None = sem prazo.
        service: Serviço já montado; None monta a partir das settings.

    Returns:
        ReconciliationReport da passada.

    Raises:
        TimeoutError: Prazo estourado.
        CredentialStoreError, SlackApiError, NotificationError: Falha de dependência.
    """
    set_correlation_id()
    if service is None:
        from app.bootstrap import get_credential_store
        from app.bootstrap.dependencies import create_reconciliation_service

        service = create_reconciliation_service(get_credential_store())

    logger.info("reconcile_job_started", extra={"deadline_seconds": deadline_seconds})
    started_at = time.perf_counter()
    try:
        async with asyncio.timeout(deadline_seconds):
            report = await service.run()
    except Exception as exc:
        logger.exception(
            "reconcile_job_failed",
            extra={"error_type": type(exc).__name__},
        )
        raise
    finally:
        record_latency(
            "reconciliation", "run", (time.perf_counter() - started_at) * 1000
        )

    record_reconciliation(report.to_dict())
    return report
