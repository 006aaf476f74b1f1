"""
Fire-and-forget dispatch of enrichment tasks.

Tasks are sent by registered name so callers never import the task modules.
Dispatch never raises: enqueue failures are logged, and nothing is enqueued
when background tasks are disabled.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from app.config import get_settings
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger

logger = get_logger("task_dispatch")

FETCH_CHANNEL_PHOTO_TASK = "app.tasks.enrichment_tasks.fetch_channel_photo_task"
FORWARD_TO_ANALYSIS_TASK = "app.tasks.enrichment_tasks.forward_to_analysis_task"


def dispatch(task_name: str, *args: Any) -> bool:
    if not get_settings().background_tasks_enabled:
        logger.debug("Background tasks disabled; not enqueuing %s", task_name)
        return False
    try:
        celery_app.send_task(task_name, args=list(args))
    except Exception as e:
        logger.warning("Failed to enqueue %s: %s", task_name, e)
        return False
    return True


def enqueue_channel_photo_fetch(channel_id: UUID) -> bool:
    return dispatch(FETCH_CHANNEL_PHOTO_TASK, str(channel_id))


def enqueue_analysis(payload: dict[str, Any]) -> bool:
    return dispatch(FORWARD_TO_ANALYSIS_TASK, payload)
