"""Commitment model: a promise extracted from a chat message."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid

from app.constants.helpdesk import CommitmentStatus
from app.db import Base
from app.models.mixins import TimestampMixin


class Commitment(Base, TimestampMixin):
    """Extracted promise with a deadline and a reminder time."""

    __tablename__ = "commitments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    channel_id = Column(
        Uuid, ForeignKey("channels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    case_id = Column(
        Uuid, ForeignKey("cases.id", ondelete="SET NULL"), nullable=True, index=True
    )
    message_id = Column(
        Uuid, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True
    )
    agent_id = Column(String(64), nullable=True)
    agent_name = Column(String(255), nullable=True)
    sender_role = Column(String(16), nullable=True)
    commitment_text = Column(Text, nullable=False)
    commitment_type = Column(String(16), nullable=False)
    is_vague = Column(Boolean, nullable=False, default=False)
    priority = Column(String(16), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    reminder_at = Column(DateTime(timezone=True), nullable=False)
    reminder_sent = Column(Boolean, nullable=False, default=False)
    status = Column(
        String(16), nullable=False, default=CommitmentStatus.PENDING.value, index=True
    )
