"""
Message persistence and channel aggregates.

The (channel_id, external_message_id) unique key makes the insert
idempotent: a duplicate delivery fails the insert, the transaction is rolled
back and no aggregate is touched. The message insert and the channel
aggregate update share one transaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.constants.helpdesk import ContentType, UserRole
from app.infra.logging_config import get_logger
from app.models.channel import Channel
from app.models.message import Message
from app.schemas.helpdesk import ClassifiedContent, ReplyInfo, SenderInfo
from app.utils.dates import ensure_aware, utcnow

logger = get_logger("message_service")

CONTENT_PLACEHOLDERS = {
    ContentType.PHOTO: "[photo]",
    ContentType.ANIMATION: "[GIF]",
    ContentType.VIDEO: "[video]",
    ContentType.VIDEO_NOTE: "[video note]",
    ContentType.VOICE: "[voice]",
    ContentType.AUDIO: "[audio]",
    ContentType.DOCUMENT: "[document]",
    ContentType.STICKER: "[sticker]",
}
DEFAULT_PLACEHOLDER = "[message]"


def build_preview(content: ClassifiedContent, limit: int) -> str:
    """Text truncated to `limit`, or a content-type placeholder."""
    if content.text:
        return content.text[:limit]
    placeholder = CONTENT_PLACEHOLDERS.get(content.content_type, DEFAULT_PLACEHOLDER)
    if content.transcript:
        return f"{placeholder} {content.transcript}"[:limit]
    if content.content_type == ContentType.DOCUMENT and content.file_name:
        return f"{placeholder} {content.file_name}"[:limit]
    return placeholder


class MessageService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.settings = get_settings()

    def get_message(self, message_id: UUID) -> Optional[Message]:
        return self.db.query(Message).filter(Message.id == message_id).first()

    def get_by_external_id(
        self, channel_id: UUID, external_message_id: int
    ) -> Optional[Message]:
        return (
            self.db.query(Message)
            .filter(
                Message.channel_id == channel_id,
                Message.external_message_id == external_message_id,
            )
            .first()
        )

    def insert_message(
        self,
        channel: Channel,
        external_message_id: int,
        sender: SenderInfo,
        role: UserRole,
        content: ClassifiedContent,
        reply: Optional[ReplyInfo] = None,
        thread_id: Optional[int] = None,
        created_at: Optional[datetime] = None,
    ) -> Optional[Message]:
        """
        Idempotent insert without channel aggregates.

        Returns None when the (channel, external id) pair already exists.
        """
        msg = self._build_message(
            channel, external_message_id, sender, role, content, reply, thread_id
        )
        if created_at is not None:
            msg.created_at = created_at
        self.db.add(msg)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(
                "Message %s already stored in channel %s",
                external_message_id,
                channel.id,
            )
            return None
        self.db.refresh(msg)
        return msg

    def persist_message(
        self,
        channel: Channel,
        external_message_id: int,
        sender: SenderInfo,
        role: UserRole,
        content: ClassifiedContent,
        reply: Optional[ReplyInfo] = None,
        thread_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Message]:
        """
        Insert the message and update channel aggregates in one transaction.

        Returns None for a duplicate delivery; nothing is applied in that case.
        """
        now = ensure_aware(now) or utcnow()
        msg = self._build_message(
            channel, external_message_id, sender, role, content, reply, thread_id
        )
        msg.created_at = now
        self.db.add(msg)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.info(
                "Duplicate delivery of message %s in channel %s",
                external_message_id,
                channel.external_chat_id,
            )
            return None

        if msg.is_from_client:
            self._apply_client_message(channel, msg, now)
        else:
            self._apply_team_message(channel, msg, now)
        channel.last_message_at = now
        channel.last_sender_name = sender.name
        channel.last_message_preview = build_preview(
            content, self.settings.message_preview_length
        )

        self.db.commit()
        self.db.refresh(msg)
        self.db.refresh(channel)
        return msg

    def update_edited_message(
        self, channel_id: UUID, external_message_id: int, text: Optional[str]
    ) -> Optional[Message]:
        """Apply an edit to a stored message. No other side effects."""
        msg = self.get_by_external_id(channel_id, external_message_id)
        if msg is None:
            return None
        msg.text = text
        msg.is_edited = True
        self.db.commit()
        self.db.refresh(msg)
        return msg

    def _build_message(
        self,
        channel: Channel,
        external_message_id: int,
        sender: SenderInfo,
        role: UserRole,
        content: ClassifiedContent,
        reply: Optional[ReplyInfo],
        thread_id: Optional[int],
    ) -> Message:
        return Message(
            channel_id=channel.id,
            external_message_id=external_message_id,
            sender_id=sender.external_id,
            sender_name=sender.name,
            sender_username=sender.username,
            sender_role=role.value,
            is_from_client=role == UserRole.CLIENT,
            content_type=content.content_type.value,
            text=content.text,
            media_url=content.media_url,
            thumbnail_url=content.thumbnail_url,
            media_file_id=content.media_file_id,
            file_name=content.file_name,
            mime_type=content.mime_type,
            file_size=content.file_size,
            transcript=content.transcript,
            reply_to_message_id=reply.message_id if reply else None,
            reply_to_text=reply.text if reply else None,
            reply_to_sender=reply.sender_name if reply else None,
            thread_id=thread_id,
            reactions={},
        )

    def _apply_client_message(
        self, channel: Channel, msg: Message, now: datetime
    ) -> None:
        last_agent_at = ensure_aware(channel.last_agent_message_at)
        if last_agent_at is not None:
            sample = max(0, int((now - last_agent_at).total_seconds() * 1000))
            count = channel.client_response_count or 0
            average = channel.client_avg_response_ms or 0
            channel.client_avg_response_ms = (average * count + sample) / (count + 1)
            channel.client_response_count = count + 1
            msg.response_time_ms = sample
        channel.unread_count = (channel.unread_count or 0) + 1
        channel.awaiting_reply = True
        channel.last_client_message_at = now

    def _apply_team_message(self, channel: Channel, msg: Message, now: datetime) -> None:
        channel.awaiting_reply = False
        channel.last_agent_message_at = now
        channel.last_team_message_at = now
        msg.is_read = True
        msg.read_at = now
        self._mark_client_messages_read(channel.id, now)
        channel.unread_count = 0

    def _mark_client_messages_read(self, channel_id: UUID, now: datetime) -> int:
        return (
            self.db.query(Message)
            .filter(
                Message.channel_id == channel_id,
                Message.is_from_client.is_(True),
                Message.is_read.is_(False),
            )
            .update({"is_read": True, "read_at": now}, synchronize_session="fetch")
        )
