"""
Webhook routes for inbound chat platform updates.

Telegram POSTs raw updates here. Every processed update is answered with 200
so the platform does not redeliver; only malformed bodies (400) and a wrong
secret (403) are rejected.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.commands.webhooks.telegram_command import TelegramWebhookCommand
from app.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


READY_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE"]


@router.api_route("/telegram", methods=READY_METHODS)
async def telegram_webhook_ready() -> dict[str, Any]:
    """Static acknowledgment for anything other than an update delivery."""
    return {"ok": True, "status": "ready"}


@router.post("/telegram")
async def telegram_webhook(
    request: Request,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Receive Telegram webhook updates and dispatch them.
    Validate X-Telegram-Bot-Api-Secret-Token if TELEGRAM_WEBHOOK_SECRET is set.
    """
    try:
        body = await request.json()
    except Exception as e:
        logger.warning("Telegram webhook invalid JSON: %s", e)
        raise HTTPException(status_code=400, detail="Invalid JSON body") from e
    if not isinstance(body, dict):
        raise HTTPException(status_code=400, detail="Body must be a JSON object")
    return await TelegramWebhookCommand(db).execute(request, body)
