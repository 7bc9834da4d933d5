"""Endpoint de relay de webhooks para canais do Slack.

Endpoint:
- POST /p/{channel_name}/{token}/ (barra final opcional)
- POST /p/... em qualquer outro formato: 400 com mensagem de caminho inválido

Fluxo:
1. Token verificado contra os tokens do canal
2. Corpo JSON (ou form com campo ``payload``) enviado ao Slack
3. Resultado do Slack traduzido em status HTTP, corpo texto puro
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status

from app.bootstrap import get_relay_webhook_use_case
from app.use_cases.relay_webhook import RelayWebhookUseCase

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_BODY = "Internal server error.\n"
INVALID_PATH_BODY = "Invalid request path\n"


@router.post("/p/{channel_name}/{token}/", response_class=Response)
@router.post("/p/{channel_name}/{token}", response_class=Response, include_in_schema=False)
async def relay_webhook(
    channel_name: str,
    token: str,
    request: Request,
    use_case: RelayWebhookUseCase = Depends(get_relay_webhook_use_case),
) -> Response:
    """Recebe webhook legado e repassa ao canal do token.

    Returns:
        Texto puro com o resultado (``ok.`` em caso de sucesso).
    """
    raw_body = await request.body()
    try:
        result = await use_case.execute(
            channel_name,
            token,
            raw_body,
            request.headers.get("content-type"),
        )
    except Exception:
        logger.exception(
            "relay_webhook_failed",
            extra={"channel_name": channel_name, "payload_size": len(raw_body)},
        )
        return Response(
            content=INTERNAL_ERROR_BODY,
            media_type="text/plain",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return Response(
        content=result.body,
        media_type="text/plain",
        status_code=result.status_code,
    )


# Registrada depois das rotas de relay: só casa caminhos fora do formato
@router.post("/p/{rest:path}", response_class=Response, include_in_schema=False)
async def relay_invalid_path(rest: str) -> Response:
    """Caminho /p/ sem exatamente dois segmentos (canal e token)."""
    logger.info(
        "relay_invalid_path",
        extra={"segment_count": len([part for part in rest.split("/") if part])},
    )
    return Response(
        content=INVALID_PATH_BODY,
        media_type="text/plain",
        status_code=status.HTTP_400_BAD_REQUEST,
    )
