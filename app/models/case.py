"""Case (ticket) models: cases, their activity log and the ticket counter."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.constants.helpdesk import CasePriority, CaseStatus
from app.db import Base
from app.models.mixins import TimestampMixin
from app.models.types import JSONType
from app.utils.dates import utcnow


class Case(Base, TimestampMixin):
    """Support ticket moving through detected -> in_progress -> resolved."""

    __tablename__ = "cases"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    channel_id = Column(
        Uuid, ForeignKey("channels.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(64), nullable=True)
    priority = Column(String(16), nullable=False, default=CasePriority.MEDIUM.value)
    status = Column(
        String(16), nullable=False, default=CaseStatus.DETECTED.value, index=True
    )
    source_message_id = Column(
        Uuid, ForeignKey("messages.id", ondelete="SET NULL"), unique=True, nullable=True
    )
    ticket_number = Column(Integer, unique=True, nullable=False)
    assigned_to = Column(Uuid, nullable=True)
    first_response_at = Column(DateTime(timezone=True), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(255), nullable=True)

    activities = relationship(
        "CaseActivity",
        back_populates="case",
        order_by="CaseActivity.created_at",
    )


class CaseActivity(Base):
    """Append-only case log entry."""

    __tablename__ = "case_activity"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    case_id = Column(
        Uuid, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(32), nullable=False)
    actor_name = Column(String(255), nullable=True)
    actor_id = Column(String(64), nullable=True)
    details = Column(JSONType, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    case = relationship("Case", back_populates="activities")


class TicketCounter(Base):
    """Named monotonically increasing counter (one row per sequence)."""

    __tablename__ = "ticket_counters"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False)
