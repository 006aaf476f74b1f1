"""
Command to create a ticket from a quoted chat message.

Triggered by a ticket command phrase sent as a reply. The quoted message is
looked up (or stored as a client message), a case is created for it unless one
already exists, and a confirmation is sent back to the chat.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.adapters.base import BasePlatformAdapter
from app.adapters.telegram import sender_from_message
from app.commands.outbound.send_outbound_command import SendOutboundCommand
from app.config import get_settings
from app.constants.helpdesk import ActivityType, UserRole
from app.core.case_rules import priority_from_urgency
from app.core.ticket_commands import USAGE_TEXT
from app.models.case import Case
from app.models.channel import Channel
from app.models.message import Message
from app.schemas.helpdesk import CreatedViaCommandDetails, OutboundMessage, SenderInfo
from app.schemas.telegram import TelegramMessage
from app.services.case_service import CaseService
from app.services.channel_service import ChannelService
from app.services.content_classifier import ContentClassifier
from app.services.message_service import MessageService
from app.utils.dates import from_timestamp

DEFAULT_TICKET_TITLE = "Ticket from chat message"
UNKNOWN_SENDER = "Unknown"


class CreateTicketCommand:
    """Create a case from the message the command replies to."""

    def __init__(
        self, db: Session, adapter: Optional[BasePlatformAdapter] = None
    ) -> None:
        self.db = db
        self.settings = get_settings()
        self.logger = logging.getLogger(__name__)
        self.channel_service = ChannelService(db)
        self.message_service = MessageService(db)
        self.case_service = CaseService(db)
        self.content_classifier = ContentClassifier(adapter=adapter)
        self.outbound = SendOutboundCommand(adapter)

    async def execute(self, message: TelegramMessage) -> dict[str, Any]:
        """
        Handle a ticket command message.

        Args:
            message: The command message (must have a chat).

        Returns:
            dict: `type` is ticket_usage, ticket_exists or ticket_created.
        """
        chat_id = str(message.chat.id)
        quoted = message.quoted_message
        if quoted is None:
            await self._reply(chat_id, USAGE_TEXT, message.message_id)
            return {"ok": True, "type": "ticket_usage"}

        actor = sender_from_message(message)
        channel = self.channel_service.resolve_channel(message.chat, actor)
        source = await self._get_or_store_quoted(channel, quoted)

        existing = self.case_service.get_by_source_message(source.id)
        if existing is not None:
            return await self._report_existing(chat_id, message.message_id, existing)

        text = source.text or source.transcript or ""
        title = text[: self.settings.case_title_length] or DEFAULT_TICKET_TITLE
        priority = priority_from_urgency(source.ai_urgency)
        actor_name = actor.name if actor else None
        case, created = self.case_service.create_case(
            channel.id,
            title=title,
            description=text or None,
            priority=priority,
            source_message=source,
            created_by=actor_name,
        )
        if not created:
            return await self._report_existing(chat_id, message.message_id, case)

        self.case_service.add_activity(
            case.id,
            ActivityType.CREATED_VIA_COMMAND,
            CreatedViaCommandDetails(
                ticket_number=case.ticket_number,
                source_message_id=str(source.id),
                command_text=message.body_text,
                priority=priority,
            ),
            actor_name=actor_name,
            actor_id=actor.external_id if actor else None,
        )
        self.logger.info(
            "Ticket #%s created from message %s in chat %s",
            case.ticket_number,
            quoted.message_id,
            chat_id,
        )
        await self._reply(
            chat_id,
            f"Ticket #{case.ticket_number} created: {title}",
            message.message_id,
        )
        return {
            "ok": True,
            "type": "ticket_created",
            "ticket_number": case.ticket_number,
            "case_id": str(case.id),
        }

    async def _get_or_store_quoted(
        self, channel: Channel, quoted: TelegramMessage
    ) -> Message:
        source = self.message_service.get_by_external_id(channel.id, quoted.message_id)
        if source is not None:
            return source

        sender = sender_from_message(quoted) or SenderInfo(name=UNKNOWN_SENDER)
        content = await self.content_classifier.classify(quoted)
        source = self.message_service.insert_message(
            channel,
            quoted.message_id,
            sender,
            UserRole.CLIENT,
            content,
            created_at=from_timestamp(quoted.date) if quoted.date else None,
        )
        if source is None:
            # Stored concurrently by another event.
            source = self.message_service.get_by_external_id(
                channel.id, quoted.message_id
            )
        if source is None:
            raise RuntimeError(f"Quoted message {quoted.message_id} could not be stored")
        return source

    async def _report_existing(
        self, chat_id: str, reply_to: int, case: Case
    ) -> dict[str, Any]:
        await self._reply(
            chat_id,
            f"Ticket #{case.ticket_number} already exists for this message.",
            reply_to,
        )
        return {"ok": True, "type": "ticket_exists", "ticket_number": case.ticket_number}

    async def _reply(self, chat_id: str, text: str, reply_to: Optional[int]) -> None:
        await self.outbound.execute(
            OutboundMessage(chat_id=chat_id, text=text, reply_to_message_id=reply_to)
        )
