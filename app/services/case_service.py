"""
Case lifecycle: ticket allocation, creation and reply-driven transitions.

States: detected -> in_progress -> resolved, with waiting reachable from
in_progress. Transitions are evaluated only for non-client messages and
append one CaseActivity row each.
"""

from __future__ import annotations

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.constants.helpdesk import (
    OPEN_CASE_STATUSES,
    ActivityType,
    CasePriority,
    CaseStatus,
)
from app.core.case_rules import find_resolution_keyword
from app.infra.logging_config import get_logger
from app.models.case import Case, CaseActivity, TicketCounter
from app.models.message import Message
from app.schemas.helpdesk import (
    ACTIVITY_DETAIL_MODELS,
    ActivityDetails,
    StatusChangeDetails,
)
from app.utils.dates import utcnow

logger = get_logger("case_service")

CASE_SEQUENCE = "case"
MAX_TICKET_ATTEMPTS = 3


class TicketSequence:
    """
    Ticket number counter stored in `ticket_counters`.

    Each call increments the row with a single UPDATE ... RETURNING. A missing
    row is seeded from the highest existing ticket number.
    """

    def __init__(
        self, db: Session, name: str = CASE_SEQUENCE, start: Optional[int] = None
    ) -> None:
        self.db = db
        self.name = name
        self.start = start if start is not None else get_settings().ticket_number_start

    def next_number(self) -> int:
        value = self._increment()
        if value is None:
            self._seed()
            value = self._increment()
        if value is None:
            raise RuntimeError(f"Ticket counter {self.name!r} could not be seeded")
        return value

    def reseed(self) -> None:
        """Move the counter up to the highest ticket number already in use."""
        current_max = self._max_ticket_number()
        if current_max is None:
            return
        self.db.execute(
            update(TicketCounter)
            .where(TicketCounter.name == self.name, TicketCounter.value < current_max)
            .values(value=current_max)
            .execution_options(synchronize_session=False)
        )

    def _increment(self) -> Optional[int]:
        return self.db.execute(
            update(TicketCounter)
            .where(TicketCounter.name == self.name)
            .values(value=TicketCounter.value + 1)
            .returning(TicketCounter.value)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()

    def _seed(self) -> None:
        current_max = self._max_ticket_number()
        seed = current_max if current_max is not None else self.start - 1
        self.db.add(TicketCounter(name=self.name, value=seed))
        try:
            self.db.flush()
        except IntegrityError:
            # Seeded concurrently by another event.
            self.db.rollback()

    def _max_ticket_number(self) -> Optional[int]:
        return self.db.query(func.max(Case.ticket_number)).scalar()


class CaseService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.tickets = TicketSequence(db)

    def get_case(self, case_id: UUID) -> Optional[Case]:
        return self.db.query(Case).filter(Case.id == case_id).first()

    def get_by_source_message(self, message_id: UUID) -> Optional[Case]:
        return self.db.query(Case).filter(Case.source_message_id == message_id).first()

    def get_open_cases(self, channel_id: UUID) -> List[Case]:
        return (
            self.db.query(Case)
            .filter(
                Case.channel_id == channel_id,
                Case.status.in_([s.value for s in OPEN_CASE_STATUSES]),
            )
            .order_by(Case.created_at.asc())
            .all()
        )

    def get_latest_open_case(self, channel_id: UUID) -> Optional[Case]:
        cases = self.get_open_cases(channel_id)
        return cases[-1] if cases else None

    def create_case(
        self,
        channel_id: UUID,
        title: str,
        description: Optional[str] = None,
        priority: CasePriority = CasePriority.MEDIUM,
        source_message: Optional[Message] = None,
        category: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> Tuple[Case, bool]:
        """
        Create a `detected` case with the next ticket number. Returns (case, created).

        A case already referencing `source_message` is returned with
        created=False. A ticket number collision re-seeds the counter and retries.
        """
        if source_message is not None:
            existing = self.get_by_source_message(source_message.id)
            if existing is not None:
                return existing, False

        source_message_id = source_message.id if source_message is not None else None
        for attempt in range(1, MAX_TICKET_ATTEMPTS + 1):
            ticket_number = self.tickets.next_number()
            case = Case(
                channel_id=channel_id,
                title=title,
                description=description,
                category=category,
                priority=priority.value,
                status=CaseStatus.DETECTED.value,
                source_message_id=source_message_id,
                ticket_number=ticket_number,
                updated_by=created_by,
            )
            self.db.add(case)
            try:
                self.db.flush()
            except IntegrityError:
                self.db.rollback()
                if source_message_id is not None:
                    existing = self.get_by_source_message(source_message_id)
                    if existing is not None:
                        return existing, False
                logger.warning(
                    "Ticket number %s taken (attempt %d); re-seeding",
                    ticket_number,
                    attempt,
                )
                self.tickets.reseed()
                continue

            if source_message_id is not None:
                self.db.query(Message).filter(Message.id == source_message_id).update(
                    {"case_id": case.id}, synchronize_session="fetch"
                )
            self.db.commit()
            self.db.refresh(case)
            logger.info("Created case %s (ticket #%s)", case.id, case.ticket_number)
            return case, True

        raise RuntimeError("Could not allocate a unique ticket number")

    def add_activity(
        self,
        case_id: UUID,
        activity_type: ActivityType,
        details: ActivityDetails,
        actor_name: Optional[str] = None,
        actor_id: Optional[str] = None,
        commit: bool = True,
    ) -> CaseActivity:
        """Append an activity row. Details are validated against the type's model."""
        model = ACTIVITY_DETAIL_MODELS.get(activity_type, ActivityDetails)
        validated = model.model_validate(details.model_dump())
        activity = CaseActivity(
            case_id=case_id,
            type=activity_type.value,
            actor_name=actor_name,
            actor_id=actor_id,
            details=validated.model_dump(mode="json", exclude_none=True),
        )
        self.db.add(activity)
        if commit:
            self.db.commit()
            self.db.refresh(activity)
        return activity

    def get_activities(self, case_id: UUID) -> List[CaseActivity]:
        return (
            self.db.query(CaseActivity)
            .filter(CaseActivity.case_id == case_id)
            .order_by(CaseActivity.created_at.asc())
            .all()
        )

    @staticmethod
    def activity_details(activity: CaseActivity) -> ActivityDetails:
        """Parse stored details into the typed model for the activity type."""
        model = ACTIVITY_DETAIL_MODELS.get(activity.type, ActivityDetails)
        return model.model_validate(activity.details or {})

    def apply_reply(
        self,
        channel_id: UUID,
        message: Message,
        agent_id: Optional[UUID] = None,
        actor_name: Optional[str] = None,
    ) -> List[Case]:
        """
        Advance every open case in the channel for a staff reply.

        detected -> in_progress on any reply, even one carrying a resolution
        keyword; in_progress or waiting -> resolved when the text carries a
        resolution keyword; waiting -> in_progress otherwise. Returns the
        cases that changed.
        """
        if message.is_from_client:
            return []

        keyword = find_resolution_keyword(message.text or message.transcript)
        actor_name = actor_name or message.sender_name
        now = utcnow()
        changed: List[Case] = []

        for case in self.get_open_cases(channel_id):
            previous = CaseStatus(case.status)
            if previous == CaseStatus.DETECTED:
                new_status, activity_type = CaseStatus.IN_PROGRESS, ActivityType.REPLIED
            elif keyword:
                new_status, activity_type = CaseStatus.RESOLVED, ActivityType.RESOLVED
            elif previous == CaseStatus.WAITING:
                new_status, activity_type = CaseStatus.IN_PROGRESS, ActivityType.REPLIED
            else:
                continue

            case.status = new_status.value
            if case.assigned_to is None and agent_id is not None:
                case.assigned_to = agent_id
            if case.first_response_at is None:
                case.first_response_at = now
            if new_status == CaseStatus.RESOLVED:
                case.resolved_at = now
            case.updated_by = actor_name
            case.updated_at = now

            self.add_activity(
                case.id,
                activity_type,
                StatusChangeDetails(
                    previous_status=previous.value,
                    new_status=new_status.value,
                    message_id=str(message.id),
                    keyword=keyword if new_status == CaseStatus.RESOLVED else None,
                ),
                actor_name=actor_name,
                actor_id=message.sender_id,
                commit=False,
            )
            changed.append(case)

        if changed:
            self.db.commit()
            logger.info(
                "Advanced %d case(s) in channel %s on message %s",
                len(changed),
                channel_id,
                message.id,
            )
        return changed
