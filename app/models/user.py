"""Helpdesk user model: a person seen in any mirrored chat."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, String, Uuid

from app.constants.helpdesk import UserRole
from app.db import Base
from app.models.mixins import TimestampMixin
from app.models.types import JSONType
from app.utils.dates import utcnow


class HelpdeskUser(Base, TimestampMixin):
    """Chat participant. `external_id` is absent for channel-post authors."""

    __tablename__ = "helpdesk_users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    external_id = Column(String(64), unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=True)
    username = Column(String(255), nullable=True, index=True)
    role = Column(String(16), nullable=False, default=UserRole.CLIENT.value)
    channel_ids = Column(JSONType, nullable=False, default=list)
    first_seen_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_seen_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
