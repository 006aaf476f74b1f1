"""Commitment persistence: detect promise language in a message and store it."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import get_settings
from app.constants.helpdesk import CommitmentStatus, UserRole
from app.core.commitment_detector import CommitmentDetector
from app.infra.logging_config import get_logger
from app.models.channel import Channel
from app.models.commitment import Commitment
from app.models.message import Message
from app.services.case_service import CaseService

logger = get_logger("commitment_service")

MAX_COMMITMENT_TEXT_LENGTH = 1000


class CommitmentService:
    def __init__(
        self, db: Session, detector: Optional[CommitmentDetector] = None
    ) -> None:
        self.db = db
        self.settings = get_settings()
        self.detector = detector or CommitmentDetector(tz=self.settings.helpdesk_timezone)

    def get_pending(self, channel_id: UUID) -> List[Commitment]:
        return (
            self.db.query(Commitment)
            .filter(
                Commitment.channel_id == channel_id,
                Commitment.status == CommitmentStatus.PENDING.value,
            )
            .order_by(Commitment.due_date.asc())
            .all()
        )

    def record_from_message(
        self,
        channel: Channel,
        message: Message,
        role: UserRole,
        agent_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Commitment]:
        """
        Detect a commitment in the message text (or transcript) and persist it.

        Runs for any sender role. Texts at or below the minimum length are skipped.
        """
        text = (message.text or message.transcript or "").strip()
        if len(text) <= self.settings.commitment_min_text_length:
            return None

        detection = self.detector.detect(text, now=now)
        if not detection.has_commitment:
            return None

        open_case = CaseService(self.db).get_latest_open_case(channel.id)
        commitment = Commitment(
            channel_id=channel.id,
            case_id=open_case.id if open_case is not None else None,
            message_id=message.id,
            agent_id=str(agent_id) if agent_id is not None else message.sender_id,
            agent_name=message.sender_name,
            sender_role=role.value,
            commitment_text=text[:MAX_COMMITMENT_TEXT_LENGTH],
            commitment_type=detection.commitment_type.value,
            is_vague=detection.is_vague,
            priority=detection.priority,
            due_date=detection.deadline,
            reminder_at=detection.reminder_at,
            reminder_sent=False,
            status=CommitmentStatus.PENDING.value,
        )
        self.db.add(commitment)
        self.db.commit()
        self.db.refresh(commitment)
        logger.info(
            "Recorded %s commitment %s (%r) in channel %s due %s",
            commitment.commitment_type,
            commitment.id,
            detection.matched_text,
            channel.id,
            detection.deadline.isoformat(),
        )
        return commitment
