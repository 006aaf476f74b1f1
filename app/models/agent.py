"""Support staff directory used for role classification."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, String, Uuid

from app.constants.helpdesk import UserRole
from app.db import Base
from app.models.mixins import TimestampMixin


class Agent(Base, TimestampMixin):
    """Staff member. `external_id` is bound on first sighting by username."""

    __tablename__ = "support_agents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    username = Column(String(255), nullable=True, index=True)
    external_id = Column(String(64), unique=True, nullable=True)
    role = Column(String(16), nullable=False, default=UserRole.EMPLOYEE.value)
    is_active = Column(Boolean, nullable=False, default=True)
