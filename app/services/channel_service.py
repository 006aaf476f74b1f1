"""
Channel resolution: one Channel per external chat id.

Creation is insert-then-commit; a uniqueness conflict means another event
created the channel first, so the row is re-read instead of failing.
"""

from __future__ import annotations

from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.constants.helpdesk import ChannelType
from app.infra.logging_config import get_logger
from app.infra.task_dispatch import enqueue_channel_photo_fetch
from app.models.channel import Channel
from app.schemas.helpdesk import SenderInfo
from app.schemas.telegram import TelegramChat

logger = get_logger("channel_service")

PRIVATE_CHAT_KIND = "private"


def channel_type_for(chat_kind: str) -> ChannelType:
    """One-to-one chats are client channels; groups and channels are partner channels."""
    if chat_kind == PRIVATE_CHAT_KIND:
        return ChannelType.CLIENT
    return ChannelType.PARTNER


class ChannelService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_channel(self, channel_id: UUID) -> Optional[Channel]:
        return self.db.query(Channel).filter(Channel.id == channel_id).first()

    def get_by_external_chat_id(self, external_chat_id: str) -> Optional[Channel]:
        return (
            self.db.query(Channel)
            .filter(Channel.external_chat_id == external_chat_id)
            .first()
        )

    def resolve_channel(
        self, chat: TelegramChat, sender: Optional[SenderInfo] = None
    ) -> Channel:
        """
        Return the channel for `chat`, creating it on first sighting.

        A newly created channel gets a background photo fetch.
        """
        channel, created = self.get_or_create_channel(chat, sender)
        if created and not channel.photo_url:
            enqueue_channel_photo_fetch(channel.id)
        return channel

    def get_or_create_channel(
        self, chat: TelegramChat, sender: Optional[SenderInfo] = None
    ) -> Tuple[Channel, bool]:
        """Get existing channel by external chat id or create one. Returns (channel, created)."""
        external_chat_id = str(chat.id)
        channel = self.get_by_external_chat_id(external_chat_id)
        if channel is not None:
            self._refresh_from_chat(channel, chat)
            return channel, False

        channel = Channel(
            external_chat_id=external_chat_id,
            name=self._display_name(chat, sender),
            type=channel_type_for(chat.type).value,
            chat_kind=chat.type,
            is_forum=bool(chat.is_forum),
        )
        self.db.add(channel)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            channel = self.get_by_external_chat_id(external_chat_id)
            if channel is None:
                raise
            logger.info("Channel %s created concurrently; re-read", external_chat_id)
            return channel, False
        self.db.refresh(channel)
        logger.info(
            "Created %s channel %s for chat %s", channel.type, channel.id, external_chat_id
        )
        return channel, True

    def set_photo_url(self, channel_id: UUID, photo_url: str) -> bool:
        """Store the photo URL unless the channel already has one."""
        channel = self.get_channel(channel_id)
        if channel is None or channel.photo_url:
            return False
        channel.photo_url = photo_url
        self.db.commit()
        return True

    def _display_name(self, chat: TelegramChat, sender: Optional[SenderInfo]) -> str:
        name = chat.display_name
        if name == str(chat.id) and sender is not None and sender.name:
            return sender.name
        return name

    def _refresh_from_chat(self, channel: Channel, chat: TelegramChat) -> None:
        changed = False
        if chat.title and channel.name != chat.title:
            channel.name = chat.title
            changed = True
        if chat.is_forum is not None and bool(channel.is_forum) != chat.is_forum:
            channel.is_forum = chat.is_forum
            changed = True
        if changed:
            self.db.commit()
