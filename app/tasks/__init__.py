# Import celery app first
from app.infra.celery_app import celery_app

# Initialize logging configuration for Celery workers
from app.infra.logging_config import LoggingConfig
from app.tasks.enrichment_tasks import (
    fetch_channel_photo_task,
    forward_to_analysis_task,
)

LoggingConfig()  # Initialize logging

__all__ = [
    "celery_app",
    "fetch_channel_photo_task",
    "forward_to_analysis_task",
]
