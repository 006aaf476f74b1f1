"""
Telegram platform adapter.

Uses python-telegram-bot for Bot API calls. Every call is bounded by the
configured timeout; media and photo lookups return None on failure so the
caller can fall back to a file reference.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from telegram import Bot
from telegram.error import TelegramError

from app.adapters.base import BasePlatformAdapter
from app.infra.logging_config import get_logger
from app.schemas.helpdesk import (
    OutboundMessage,
    OutboundSendResult,
    ReplyInfo,
    SenderInfo,
)
from app.schemas.telegram import TelegramMessage

logger = get_logger("telegram_adapter")

FILE_URL_TEMPLATE = "https://api.telegram.org/file/bot{token}/{path}"
DEFAULT_TIMEOUT_SECONDS = 10.0
TELEGRAM_SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def secret_header_matches(
    expected: Optional[str], request_headers: Optional[dict[str, str]] = None
) -> bool:
    """True when no secret is configured or the secret header carries it."""
    if not expected:
        return True
    request_headers = request_headers or {}
    header_lower = TELEGRAM_SECRET_HEADER.lower()
    actual = None
    for key, value in request_headers.items():
        if key.lower() == header_lower:
            actual = value
            break
    return actual == expected


class TelegramAdapter(BasePlatformAdapter):
    """Telegram adapter: resolve files and chat photos, send messages via Bot API."""

    def __init__(
        self,
        bot_token: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._bot_token = bot_token
        self._timeout = timeout_seconds
        self._bot: Optional[Bot] = None

    def _get_bot(self) -> Bot:
        if self._bot is None:
            self._bot = Bot(token=self._bot_token)
        return self._bot

    def _file_url(self, file_path: str) -> str:
        # PTB returns an absolute URL in file_path; older servers return the bare path.
        if file_path.startswith(("http://", "https://")):
            return file_path
        return FILE_URL_TEMPLATE.format(token=self._bot_token, path=file_path)

    async def get_file_url(self, file_id: str) -> Optional[str]:
        """Resolve a Telegram file_id to a download URL."""
        try:
            tg_file = await asyncio.wait_for(
                self._get_bot().get_file(file_id), timeout=self._timeout
            )
        except (TelegramError, asyncio.TimeoutError) as e:
            logger.warning("Failed to resolve Telegram file %s: %s", file_id, e)
            return None
        if not tg_file or not tg_file.file_path:
            return None
        return self._file_url(tg_file.file_path)

    async def get_chat_photo_url(self, chat_id: str) -> Optional[str]:
        """Resolve the chat's big photo to a download URL."""
        try:
            chat = await asyncio.wait_for(
                self._get_bot().get_chat(chat_id), timeout=self._timeout
            )
        except (TelegramError, asyncio.TimeoutError) as e:
            logger.warning("Failed to fetch Telegram chat %s: %s", chat_id, e)
            return None
        if not chat or not chat.photo:
            return None
        return await self.get_file_url(chat.photo.big_file_id)

    async def send(self, outbound: OutboundMessage) -> OutboundSendResult:
        """Send message via Telegram Bot API."""
        send_kw: dict[str, Any] = {
            "chat_id": outbound.chat_id,
            "text": outbound.text,
        }
        if outbound.reply_to_message_id:
            send_kw["reply_to_message_id"] = outbound.reply_to_message_id
        if outbound.parse_mode:
            send_kw["parse_mode"] = outbound.parse_mode
        sent = await asyncio.wait_for(
            self._get_bot().send_message(**send_kw), timeout=self._timeout
        )
        return OutboundSendResult(
            success=True,
            platform_message_id=(
                str(sent.message_id) if sent and sent.message_id else None
            ),
        )


def sender_from_message(message: TelegramMessage) -> Optional[SenderInfo]:
    """Author of a message: `from`, else `sender_chat` (channel posts, anonymous admins)."""
    user = message.from_
    if user is not None and message.sender_chat is None:
        return SenderInfo(
            external_id=str(user.id),
            name=user.full_name or user.username or str(user.id),
            username=user.username,
            is_bot=user.is_bot,
        )
    if message.sender_chat is not None:
        return SenderInfo(
            external_id=None,
            name=message.sender_chat.display_name,
            username=message.sender_chat.username,
        )
    return None


def reply_from_message(message: TelegramMessage) -> Optional[ReplyInfo]:
    quoted = message.quoted_message
    if quoted is None:
        return None
    quoted_sender = sender_from_message(quoted)
    return ReplyInfo(
        message_id=quoted.message_id,
        text=quoted.body_text or None,
        sender_name=quoted_sender.name if quoted_sender else None,
    )
