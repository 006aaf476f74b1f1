"""
Normalized values passed between the helpdesk layers.

Telegram payloads are converted into these shapes by the commands; services
and the pure core logic only see these.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.constants.helpdesk import (
    ActivityType,
    CasePriority,
    CommitmentType,
    ContentType,
    RoleMethod,
    UserRole,
)


class SenderInfo(BaseModel):
    """Author of a message: a user, or a chat posting as itself."""

    external_id: Optional[str] = None
    name: str
    username: Optional[str] = None
    is_bot: bool = False


class ClassifiedContent(BaseModel):
    """Content type, text and resolved media of one message."""

    content_type: ContentType = ContentType.TEXT
    text: Optional[str] = None
    media_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    media_file_id: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None
    transcript: Optional[str] = None

    @property
    def effective_text(self) -> str:
        """Text, or the transcript for voice/video messages without text."""
        return self.text or self.transcript or ""


class ReplyInfo(BaseModel):
    """The message a new message replies to."""

    message_id: int
    text: Optional[str] = None
    sender_name: Optional[str] = None


class RoleClassification(BaseModel):
    role: UserRole
    method: RoleMethod
    agent_id: Optional[UUID] = None

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT


class CommitmentDetection(BaseModel):
    """Result of scanning a text for promise language."""

    has_commitment: bool
    is_vague: bool = False
    commitment_type: Optional[CommitmentType] = None
    matched_text: Optional[str] = None
    deadline: Optional[datetime] = None
    detected_deadline: Optional[datetime] = None
    reminder_at: Optional[datetime] = None
    priority: Optional[str] = None


class ActivityDetails(BaseModel):
    """Base for case activity payloads. Unknown keys are preserved."""

    model_config = ConfigDict(extra="allow")


class StatusChangeDetails(ActivityDetails):
    """`replied` and `resolved` activities."""

    previous_status: str
    new_status: str
    message_id: Optional[str] = None
    keyword: Optional[str] = None


class CreatedViaCommandDetails(ActivityDetails):
    ticket_number: int
    source_message_id: str
    command_text: Optional[str] = None
    priority: CasePriority = CasePriority.MEDIUM


ACTIVITY_DETAIL_MODELS: dict[str, type[ActivityDetails]] = {
    ActivityType.REPLIED: StatusChangeDetails,
    ActivityType.RESOLVED: StatusChangeDetails,
    ActivityType.CREATED_VIA_COMMAND: CreatedViaCommandDetails,
}


class OutboundMessage(BaseModel):
    """Message sent back to a chat (command confirmations, instructions)."""

    chat_id: str
    text: str
    reply_to_message_id: Optional[int] = None
    parse_mode: Optional[str] = None


class OutboundSendResult(BaseModel):
    """Result of sending an outbound message (success + optional message_id)."""

    success: bool
    platform_message_id: Optional[str] = None
