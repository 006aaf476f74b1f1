"""Channel model: one row per external chat."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text, Uuid

from app.constants.helpdesk import ChannelType
from app.db import Base
from app.models.mixins import TimestampMixin


class Channel(Base, TimestampMixin):
    """
    A mirrored conversation. Exactly one row per external chat id.

    Aggregates (unread count, awaiting reply, response-time average, last
    message fields) are refreshed on every persisted message.
    """

    __tablename__ = "channels"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    external_chat_id = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    type = Column(String(16), nullable=False, default=ChannelType.CLIENT.value)
    chat_kind = Column(String(32), nullable=True)  # raw Telegram chat.type
    is_forum = Column(Boolean, nullable=False, default=False)
    photo_url = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    unread_count = Column(Integer, nullable=False, default=0)
    awaiting_reply = Column(Boolean, nullable=False, default=False)
    last_message_at = Column(DateTime(timezone=True), nullable=True)
    last_client_message_at = Column(DateTime(timezone=True), nullable=True)
    last_sender_name = Column(String(255), nullable=True)
    last_message_preview = Column(Text, nullable=True)

    client_avg_response_ms = Column(Float, nullable=False, default=0)
    client_response_count = Column(Integer, nullable=False, default=0)
    last_agent_message_at = Column(DateTime(timezone=True), nullable=True)
    last_team_message_at = Column(DateTime(timezone=True), nullable=True)
