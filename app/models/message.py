"""Message model. (channel_id, external_message_id) is the idempotency key."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)

from app.constants.helpdesk import ContentType
from app.db import Base
from app.models.mixins import TimestampMixin
from app.models.types import JSONType


class Message(Base, TimestampMixin):
    """
    One mirrored chat message.

    Created once. After creation only reactions, read state, transcript,
    edited text and the case back-reference change.
    """

    __tablename__ = "messages"

    __table_args__ = (
        UniqueConstraint(
            "channel_id",
            "external_message_id",
            name="uq_messages_channel_external_message",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    channel_id = Column(
        Uuid, ForeignKey("channels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    external_message_id = Column(BigInteger, nullable=False)

    sender_id = Column(String(64), nullable=True)
    sender_name = Column(String(255), nullable=True)
    sender_username = Column(String(255), nullable=True)
    sender_role = Column(String(16), nullable=False)
    is_from_client = Column(Boolean, nullable=False, default=True)

    content_type = Column(String(32), nullable=False, default=ContentType.TEXT.value)
    text = Column(Text, nullable=True)
    media_url = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    media_file_id = Column(String(255), nullable=True)
    file_name = Column(String(512), nullable=True)
    mime_type = Column(String(128), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    transcript = Column(Text, nullable=True)

    reply_to_message_id = Column(BigInteger, nullable=True)
    reply_to_text = Column(Text, nullable=True)
    reply_to_sender = Column(String(255), nullable=True)
    thread_id = Column(BigInteger, nullable=True)

    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    reactions = Column(JSONType, nullable=False, default=dict)
    # Back-reference only; cases.source_message_id carries the foreign key.
    case_id = Column(Uuid, nullable=True, index=True)
    response_time_ms = Column(BigInteger, nullable=True)
    ai_urgency = Column(Integer, nullable=True)
    is_edited = Column(Boolean, nullable=False, default=False)
