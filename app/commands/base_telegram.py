"""
Shared Telegram access for helpdesk commands and background tasks.

Without a bot token there is no adapter: media keeps its `tg-file:` handle,
chat photos are not fetched and confirmations are not sent.
"""

from __future__ import annotations

from typing import Optional

from app.adapters.telegram import TelegramAdapter
from app.config import Settings, get_settings


class BaseTelegramCommand:
    """Resolves the TelegramAdapter once per command instance."""

    _adapter: Optional[TelegramAdapter] = None
    _adapter_resolved: bool = False

    @property
    def adapter(self) -> Optional[TelegramAdapter]:
        if not self._adapter_resolved:
            self._adapter = self.get_telegram_adapter()
            self._adapter_resolved = True
        return self._adapter

    @staticmethod
    def get_telegram_adapter(
        settings: Optional[Settings] = None,
    ) -> Optional[TelegramAdapter]:
        settings = settings or get_settings()
        if not settings.telegram_enabled:
            return None
        return TelegramAdapter(
            bot_token=settings.telegram_bot_token,
            timeout_seconds=settings.telegram_api_timeout_seconds,
        )
