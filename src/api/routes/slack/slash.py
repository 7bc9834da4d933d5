"""Endpoint de slash commands do Slack.

Endpoint:
- POST /slash/: comandos /relay-* (form urlencoded assinado pelo Slack)

Segurança:
- Assinatura v0 (X-Slack-Signature) obrigatória, 401 caso inválida
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from api.connectors.slack import (
    SlashCommandParseError,
    parse_slash_command,
    verify_slack_signature,
)
from app.bootstrap import get_slash_command_use_case
from app.use_cases.slash_command import SlashCommandUseCase
from config.settings import SlackSettings, get_slack_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/slash/", response_model=None)
@router.post("/slash", response_model=None, include_in_schema=False)
async def receive_slash_command(
    request: Request,
    settings: SlackSettings = Depends(get_slack_settings),
    use_case: SlashCommandUseCase = Depends(get_slash_command_use_case),
) -> Response:
    """Valida assinatura, interpreta o comando e responde in_channel."""
    raw_body = await request.body()

    signature = verify_slack_signature(
        raw_body, request.headers, settings.signing_secret
    )
    if not signature.valid:
        logger.warning("slash_signature_invalid", extra={"error": signature.error})
        return Response(
            content="Unauthorized",
            media_type="text/plain",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    try:
        command = parse_slash_command(raw_body)
    except SlashCommandParseError as exc:
        logger.warning("slash_command_invalid", extra={"error": str(exc)})
        return Response(
            content="Bad Request",
            media_type="text/plain",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    host = request.headers.get("host") or request.url.netloc
    try:
        result = await use_case.execute(command, host)
    except Exception:
        logger.exception(
            "slash_command_failed",
            extra={"command": command.command, "channel_id": command.channel_id},
        )
        return Response(
            content="Internal server error.\n",
            media_type="text/plain",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return JSONResponse(content=result.to_dict())
