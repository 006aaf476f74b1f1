"""Applies reaction updates to the stored per-message reaction map."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.core.reactions import merge_reactions
from app.infra.logging_config import get_logger
from app.models.channel import Channel
from app.models.message import Message

logger = get_logger("reaction_service")


class ReactionService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def apply_reaction_update(
        self,
        chat_id: str,
        external_message_id: int,
        old: Iterable[str],
        new: Iterable[str],
        actor_name: str,
    ) -> Optional[Message]:
        """
        Merge one actor's reaction change into the message's reaction map.

        Returns None (and changes nothing) when the channel or message is unknown.
        """
        message = (
            self.db.query(Message)
            .join(Channel, Channel.id == Message.channel_id)
            .filter(
                Channel.external_chat_id == str(chat_id),
                Message.external_message_id == external_message_id,
            )
            .first()
        )
        if message is None:
            logger.debug(
                "Reaction target %s in chat %s not found", external_message_id, chat_id
            )
            return None

        current = dict(message.reactions or {})
        merged = merge_reactions(current, old, new, actor_name)
        if merged != current:
            message.reactions = merged
            self.db.commit()
            self.db.refresh(message)
        return message
