"""Router do Slack — agrega relay de webhooks e slash commands."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.slack.slash import router as slash_router
from api.routes.slack.webhook import router as webhook_router

router = APIRouter()

router.include_router(webhook_router)
router.include_router(slash_router)
