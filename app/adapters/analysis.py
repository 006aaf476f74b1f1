"""Client for the downstream AI analysis service."""

from __future__ import annotations

from typing import Any, Optional

import requests

from app.config import get_settings
from app.infra.logging_config import get_logger

logger = get_logger("analysis")


class AnalysisClient:
    """Posts persisted messages to the analysis service. Responses are only logged."""

    def __init__(
        self, api_url: Optional[str] = None, timeout_seconds: Optional[float] = None
    ) -> None:
        settings = get_settings()
        self.api_url = api_url or settings.analysis_api_url
        self.timeout = timeout_seconds or settings.analysis_timeout_seconds

    def submit(self, payload: dict[str, Any]) -> Optional[int]:
        """POST the payload. Returns the HTTP status, or None if not sent."""
        if not self.api_url:
            logger.debug("Analysis service not configured; skipping")
            return None
        try:
            resp = requests.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(
                "Analysis request failed for message %s: %s",
                payload.get("message_id"),
                e,
            )
            return None
        logger.info(
            "Analysis service answered HTTP %s for message %s",
            resp.status_code,
            payload.get("message_id"),
        )
        return resp.status_code
