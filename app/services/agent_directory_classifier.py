"""
Role classification backed by the support_agents directory.

Order: staff name patterns, agent by external id, agent by username. A
username match on an agent without an external id binds the sender id to
that agent so later lookups resolve by id.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.constants.helpdesk import RoleMethod, UserRole
from app.core.role_rules import matches_staff_name, normalize_username
from app.infra.logging_config import get_logger
from app.models.agent import Agent
from app.schemas.helpdesk import RoleClassification

logger = get_logger("agent_directory_classifier")


class AgentDirectoryClassifier:
    """Default RoleClassifier."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def classify(
        self,
        sender_id: Optional[str],
        username: Optional[str],
        display_name: Optional[str],
    ) -> RoleClassification:
        if matches_staff_name(display_name):
            return RoleClassification(
                role=UserRole.EMPLOYEE, method=RoleMethod.NAME_PATTERN
            )

        if sender_id:
            agent = (
                self.db.query(Agent)
                .filter(Agent.external_id == sender_id, Agent.is_active.is_(True))
                .first()
            )
            if agent is not None:
                return RoleClassification(
                    role=UserRole(agent.role),
                    method=RoleMethod.EXTERNAL_ID,
                    agent_id=agent.id,
                )

        cleaned = normalize_username(username)
        if cleaned:
            agent = (
                self.db.query(Agent)
                .filter(
                    func.lower(Agent.username).in_([cleaned, f"@{cleaned}"]),
                    Agent.is_active.is_(True),
                )
                .first()
            )
            if agent is not None:
                if sender_id and not agent.external_id:
                    self._bind_external_id(agent, sender_id)
                return RoleClassification(
                    role=UserRole(agent.role),
                    method=RoleMethod.USERNAME,
                    agent_id=agent.id,
                )

        return RoleClassification(role=UserRole.CLIENT, method=RoleMethod.DEFAULT)

    def _bind_external_id(self, agent: Agent, sender_id: str) -> None:
        agent_id = agent.id
        agent.external_id = sender_id
        try:
            self.db.commit()
        except IntegrityError:
            # The id is already bound to another agent.
            self.db.rollback()
            logger.warning(
                "Could not bind external id %s to agent %s: already bound",
                sender_id,
                agent_id,
            )
            return
        logger.info("Bound external id %s to agent %s", sender_id, agent_id)
