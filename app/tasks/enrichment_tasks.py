"""Enrichment tasks: chat photo lookup and forwarding to the analysis service."""

from __future__ import annotations

import asyncio
from typing import Any, Optional
from uuid import UUID

from app.adapters.analysis import AnalysisClient
from app.commands.base_telegram import BaseTelegramCommand
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.infra.task_dispatch import FETCH_CHANNEL_PHOTO_TASK, FORWARD_TO_ANALYSIS_TASK
from app.services.channel_service import ChannelService
from app.utils.db.db_session_helper import db_session

logger = get_logger("enrichment_tasks")


@celery_app.task(name=FETCH_CHANNEL_PHOTO_TASK)
def fetch_channel_photo_task(channel_id_str: str) -> Optional[str]:
    """Resolve the chat photo and store it when the channel still has none."""
    try:
        channel_id = UUID(channel_id_str)
    except ValueError:
        logger.warning("Invalid channel_id for photo fetch: %s", channel_id_str)
        return None

    adapter = BaseTelegramCommand.get_telegram_adapter()
    if adapter is None:
        logger.debug("Telegram not configured; skipping photo fetch")
        return None

    with db_session() as db:
        service = ChannelService(db)
        channel = service.get_channel(channel_id)
        if channel is None or channel.photo_url:
            return None
        photo_url = asyncio.run(adapter.get_chat_photo_url(channel.external_chat_id))
        if not photo_url or not service.set_photo_url(channel_id, photo_url):
            return None
        logger.info("Stored photo for channel %s", channel_id)
    return photo_url


@celery_app.task(name=FORWARD_TO_ANALYSIS_TASK)
def forward_to_analysis_task(payload: dict[str, Any]) -> Optional[int]:
    """POST a persisted message to the AI analysis service."""
    return AnalysisClient().submit(payload)
