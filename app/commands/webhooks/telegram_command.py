"""
Command to handle Telegram webhook updates.

Validates the secret header, parses the update and routes it: reaction
changes to the reaction merge, ticket commands to the ticket handler and
every other message to the ingestion pipeline. Any failure after the secret
check is logged and acknowledged with ok=True so Telegram does not redeliver.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from fastapi import HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.adapters.telegram import secret_header_matches, sender_from_message
from app.commands.base_telegram import BaseTelegramCommand
from app.commands.ingest_message_command import IngestMessageCommand
from app.commands.ticket_command import CreateTicketCommand
from app.config import get_settings
from app.core.ticket_commands import is_ticket_command
from app.schemas.telegram import (
    TelegramMessage,
    TelegramMessageReactionUpdated,
    TelegramWebhookUpdate,
)
from app.services.channel_service import ChannelService
from app.services.message_service import MessageService
from app.services.reaction_service import ReactionService

# Update sections carrying a message, in lookup order.
MESSAGE_SECTIONS = ("message", "edited_message", "channel_post", "edited_channel_post")
EDITED_SECTIONS = ("edited_message", "edited_channel_post")


def _skipped(reason: str) -> dict[str, Any]:
    return {"ok": True, "skipped": reason}


class TelegramWebhookCommand(BaseTelegramCommand):
    """
    Command to handle Telegram webhook updates.
    Validates X-Telegram-Bot-Api-Secret-Token, then dispatches by update kind.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()
        self.channel_service = ChannelService(db)
        self.message_service = MessageService(db)
        self.reaction_service = ReactionService(db)
        self.logger = logging.getLogger(__name__)

    async def execute(self, request: Request, body: dict[str, Any]) -> dict[str, Any]:
        """
        Execute the Telegram webhook: validate secret, parse body, dispatch.

        Args:
            request: The incoming webhook request (headers for secret validation).
            body: Raw JSON object sent by Telegram.

        Returns:
            dict: Always `ok=True`; `skipped`, `duplicate`, `type` or `error`
                describe what happened.

        Raises:
            HTTPException: 403 on invalid secret.
        """
        headers = dict(request.headers) if request.headers else {}
        if not secret_header_matches(self.settings.telegram_webhook_secret, headers):
            raise HTTPException(status_code=403, detail="Invalid webhook secret")

        update_id = body.get("update_id")
        try:
            return await self._dispatch(body)
        except Exception as e:
            self.db.rollback()
            self.logger.exception("Telegram update %s failed: %s", update_id, e)
            return {"ok": True, "error": str(e)}

    async def _dispatch(self, body: dict[str, Any]) -> dict[str, Any]:
        try:
            update = TelegramWebhookUpdate.model_validate(body)
        except ValidationError as e:
            self.logger.warning(
                "Invalid Telegram update %s: %s", body.get("update_id"), e
            )
            return _skipped("invalid_update")

        if update.message_reaction is not None:
            return self._handle_reaction(update.message_reaction)

        for section in MESSAGE_SECTIONS:
            message = getattr(update, section)
            if message is not None:
                return await self._handle_message(
                    message, edited=section in EDITED_SECTIONS
                )

        self.logger.debug("Unsupported Telegram update %s", update.update_id)
        return _skipped("unsupported_update")

    def _handle_reaction(
        self, reaction: TelegramMessageReactionUpdated
    ) -> dict[str, Any]:
        stored = self.reaction_service.apply_reaction_update(
            str(reaction.chat.id),
            reaction.message_id,
            [r.key for r in reaction.old_reaction],
            [r.key for r in reaction.new_reaction],
            reaction.actor_name,
        )
        if stored is None:
            return _skipped("message_not_found")
        return {"ok": True, "type": "reaction", "message_id": str(stored.id)}

    async def _handle_message(
        self, message: TelegramMessage, edited: bool
    ) -> dict[str, Any]:
        if message.chat is None:
            return _skipped("no_chat")
        sender = sender_from_message(message)
        if sender is None:
            return _skipped("no_sender")

        if message.new_chat_members:
            channel = self.channel_service.resolve_channel(message.chat, sender)
            return {
                "ok": True,
                "type": "new_chat_members",
                "channel_id": str(channel.id),
            }
        if message.is_service_message():
            return _skipped("service_message")

        if not edited and is_ticket_command(message.body_text):
            return await CreateTicketCommand(self.db, self.adapter).execute(message)

        channel = self.channel_service.resolve_channel(message.chat, sender)
        if edited:
            updated = self._apply_edit(channel.id, message)
            if updated is not None:
                return updated

        return await IngestMessageCommand(self.db, self.adapter).execute(
            channel, message, sender
        )

    def _apply_edit(
        self, channel_id: UUID, message: TelegramMessage
    ) -> Optional[dict[str, Any]]:
        stored = self.message_service.update_edited_message(
            channel_id, message.message_id, message.body_text or None
        )
        if stored is None:
            return None
        return {"ok": True, "type": "edited", "message_id": str(stored.id)}
