"""Helpdesk user resolution: create on first sighting, refresh on every sighting."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.constants.helpdesk import UserRole
from app.infra.logging_config import get_logger
from app.models.user import HelpdeskUser
from app.schemas.helpdesk import SenderInfo
from app.utils.dates import utcnow

logger = get_logger("user_service")


class UserService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_user(self, user_id: UUID) -> Optional[HelpdeskUser]:
        return self.db.query(HelpdeskUser).filter(HelpdeskUser.id == user_id).first()

    def get_by_external_id(self, external_id: str) -> Optional[HelpdeskUser]:
        return (
            self.db.query(HelpdeskUser)
            .filter(HelpdeskUser.external_id == external_id)
            .first()
        )

    def resolve_sender(
        self, sender: SenderInfo, channel_id: UUID, role: UserRole
    ) -> HelpdeskUser:
        """
        Return the user for `sender`, creating it with `role` if absent.

        Name, username and last-seen are refreshed and the channel is added to
        the user's channel list. Senders without an external id (channel posts)
        are matched by username and name.
        """
        now = utcnow()
        if sender.external_id is None:
            user = self._find_anonymous(sender)
        else:
            user = self.get_by_external_id(sender.external_id)

        if user is not None:
            self._touch(user, sender, channel_id, role, now)
            self.db.commit()
            return user

        user = HelpdeskUser(
            external_id=sender.external_id,
            name=sender.name,
            username=sender.username,
            role=role.value,
            channel_ids=[str(channel_id)],
            first_seen_at=now,
            last_seen_at=now,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            user = self.get_by_external_id(sender.external_id)
            if user is None:
                raise
            self._touch(user, sender, channel_id, role, now)
            self.db.commit()
            return user
        self.db.refresh(user)
        logger.info("Created %s user %s", user.role, user.id)
        return user

    def _find_anonymous(self, sender: SenderInfo) -> Optional[HelpdeskUser]:
        q = self.db.query(HelpdeskUser).filter(
            HelpdeskUser.external_id.is_(None), HelpdeskUser.name == sender.name
        )
        if sender.username:
            q = q.filter(HelpdeskUser.username == sender.username)
        else:
            q = q.filter(HelpdeskUser.username.is_(None))
        return q.first()

    def _touch(
        self,
        user: HelpdeskUser,
        sender: SenderInfo,
        channel_id: UUID,
        role: UserRole,
        now: datetime,
    ) -> None:
        if sender.name:
            user.name = sender.name
        if sender.username:
            user.username = sender.username
        user.last_seen_at = now
        channel_ids = list(user.channel_ids or [])
        if str(channel_id) not in channel_ids:
            user.channel_ids = channel_ids + [str(channel_id)]
        # A client classification never overrides a stored staff role.
        if role != UserRole.CLIENT and user.role != role.value:
            user.role = role.value
