"""
Command to ingest one Telegram message into the helpdesk.

Pipeline: classify the sender, resolve the user, classify content, persist
the message with channel aggregates, then advance open cases and record
commitments. Case and commitment failures are logged; the stored message is
never lost because of them.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.adapters.base import BasePlatformAdapter
from app.adapters.telegram import reply_from_message
from app.adapters.transcription import TranscriptionClient
from app.config import get_settings
from app.core.role_rules import RoleClassifier
from app.infra.task_dispatch import enqueue_analysis
from app.models.channel import Channel
from app.models.message import Message
from app.schemas.helpdesk import RoleClassification, SenderInfo
from app.schemas.telegram import TelegramMessage
from app.services.agent_directory_classifier import AgentDirectoryClassifier
from app.services.case_service import CaseService
from app.services.commitment_service import CommitmentService
from app.services.content_classifier import ContentClassifier
from app.services.message_service import MessageService
from app.services.user_service import UserService


class IngestMessageCommand:
    """Persist a message and apply its side effects exactly once."""

    def __init__(
        self,
        db: Session,
        adapter: Optional[BasePlatformAdapter] = None,
        role_classifier: Optional[RoleClassifier] = None,
        transcriber: Optional[TranscriptionClient] = None,
    ) -> None:
        self.db = db
        self.settings = get_settings()
        self.logger = logging.getLogger(__name__)
        self.role_classifier = role_classifier or AgentDirectoryClassifier(db)
        self.user_service = UserService(db)
        self.message_service = MessageService(db)
        self.case_service = CaseService(db)
        self.commitment_service = CommitmentService(db)
        self.content_classifier = ContentClassifier(
            adapter=adapter,
            transcriber=transcriber or TranscriptionClient(),
            transcription_timeout=self.settings.transcription_timeout_seconds,
        )

    async def execute(
        self, channel: Channel, message: TelegramMessage, sender: SenderInfo
    ) -> dict[str, Any]:
        """
        Run the ingestion pipeline for a new message.

        Args:
            channel: Resolved channel of the message.
            message: Validated Telegram message.
            sender: Normalized author of the message.

        Returns:
            dict: `{"ok": True, "duplicate": True}` for a repeated delivery,
                otherwise the stored message and channel ids.
        """
        classification = self.role_classifier.classify(
            sender.external_id, sender.username, sender.name
        )
        role = classification.role
        user = self.user_service.resolve_sender(sender, channel.id, role)
        responder_id = None
        if not classification.is_client:
            # Staff matched by name have no directory row; their user id stands in.
            responder_id = classification.agent_id or user.id

        content = await self.content_classifier.classify(message)
        stored = self.message_service.persist_message(
            channel,
            message.message_id,
            sender,
            role,
            content,
            reply=reply_from_message(message),
            thread_id=message.message_thread_id,
        )
        if stored is None:
            return {"ok": True, "duplicate": True}

        enqueue_analysis(
            {
                "message_id": str(stored.id),
                "text": content.effective_text,
                "content_type": content.content_type.value,
                "channel_id": str(channel.id),
                "sender_role": role.value,
            }
        )
        self._advance_cases(channel, stored, classification, responder_id)
        self._record_commitment(channel, stored, classification, responder_id)

        return {
            "ok": True,
            "type": "message",
            "message_id": str(stored.id),
            "channel_id": str(channel.id),
        }

    def _advance_cases(
        self,
        channel: Channel,
        message: Message,
        classification: RoleClassification,
        responder_id: Optional[UUID],
    ) -> None:
        if classification.is_client:
            return
        try:
            self.case_service.apply_reply(
                channel.id, message, agent_id=responder_id
            )
        except Exception as e:
            self.db.rollback()
            self.logger.exception(
                "Case transition failed for message %s in channel %s: %s",
                message.id,
                channel.id,
                e,
            )

    def _record_commitment(
        self,
        channel: Channel,
        message: Message,
        classification: RoleClassification,
        responder_id: Optional[UUID],
    ) -> None:
        try:
            self.commitment_service.record_from_message(
                channel,
                message,
                classification.role,
                agent_id=responder_id,
            )
        except Exception as e:
            self.db.rollback()
            self.logger.exception(
                "Commitment detection failed for message %s in channel %s: %s",
                message.id,
                channel.id,
                e,
            )
