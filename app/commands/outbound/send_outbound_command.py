"""
Command to send a reply back to a chat.

Used for ticket confirmations and usage instructions. Failures are logged and
reported in the result; they never propagate into the webhook.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.adapters.base import BasePlatformAdapter
from app.schemas.helpdesk import OutboundMessage, OutboundSendResult

logger = logging.getLogger(__name__)


class SendOutboundCommand:
    """Send an outbound message through the platform adapter."""

    def __init__(self, adapter: Optional[BasePlatformAdapter]) -> None:
        self._adapter = adapter

    async def execute(self, body: OutboundMessage) -> OutboundSendResult:
        """
        Send the outbound message via the adapter.

        Args:
            body: Target chat, text and optional reply-to message id.

        Returns:
            OutboundSendResult: success=False when the platform is not
                configured or the send failed.
        """
        if self._adapter is None:
            logger.info("Telegram not configured; reply to chat %s not sent", body.chat_id)
            return OutboundSendResult(success=False)
        try:
            return await self._adapter.send(body)
        except Exception as e:
            logger.exception("Failed to send message to chat %s: %s", body.chat_id, e)
            return OutboundSendResult(success=False)
