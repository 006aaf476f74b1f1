"""
Platform adapter interface.

Adapters encapsulate platform-specific I/O (media resolution, chat photos,
outbound messages) for the helpdesk pipeline. Webhook secrets are checked
before any adapter is built, so a deployment without a bot token still
authenticates deliveries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.helpdesk import OutboundMessage, OutboundSendResult


class BasePlatformAdapter(ABC):
    """What the ingestion pipeline needs from a chat platform."""

    @abstractmethod
    async def send(self, outbound: OutboundMessage) -> OutboundSendResult:
        """Post a text message to a chat, optionally as a reply."""
        ...

    @abstractmethod
    async def get_file_url(self, file_id: str) -> Optional[str]:
        """Map an opaque file handle to a downloadable URL. None on failure."""
        ...

    @abstractmethod
    async def get_chat_photo_url(self, chat_id: str) -> Optional[str]:
        """Return a URL for the chat's current photo. None if absent or on failure."""
        ...
