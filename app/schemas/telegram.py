"""
Telegram webhook payload schemas.

Matches the structure Telegram sends to webhook endpoints. Only the fields
the ingestion pipeline reads are declared; everything else is kept as extra
data so service-message markers can still be detected.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Message fields that mark a Telegram service message (no user content).
SERVICE_MESSAGE_FIELDS = (
    "left_chat_member",
    "new_chat_title",
    "new_chat_photo",
    "delete_chat_photo",
    "group_chat_created",
    "supergroup_chat_created",
    "channel_chat_created",
    "migrate_to_chat_id",
    "migrate_from_chat_id",
    "pinned_message",
    "forum_topic_created",
    "forum_topic_edited",
    "forum_topic_closed",
    "forum_topic_reopened",
    "general_forum_topic_hidden",
    "general_forum_topic_unhidden",
    "video_chat_scheduled",
    "video_chat_started",
    "video_chat_ended",
    "video_chat_participants_invited",
)


class TelegramUser(BaseModel):
    """Telegram user (message.from)."""

    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p).strip()


class TelegramChat(BaseModel):
    """Telegram chat (message.chat, message.sender_chat)."""

    id: int
    type: str
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_forum: Optional[bool] = None

    @property
    def display_name(self) -> str:
        if self.title:
            return self.title
        name = " ".join(p for p in (self.first_name, self.last_name) if p).strip()
        return name or self.username or str(self.id)


class TelegramMessageEntity(BaseModel):
    """Telegram message entity (e.g. bot_command, mention)."""

    offset: int
    length: int
    type: str


class TelegramPhotoSize(BaseModel):
    """One size of a photo, or a media thumbnail."""

    file_id: str
    file_unique_id: Optional[str] = None
    width: int = 0
    height: int = 0
    file_size: Optional[int] = None


class TelegramMedia(BaseModel):
    """Animation, video, video note, voice, audio or document attachment."""

    file_id: str
    file_unique_id: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None
    duration: Optional[int] = None
    thumbnail: Optional[TelegramPhotoSize] = None
    thumb: Optional[TelegramPhotoSize] = None  # Bot API < 6.6

    @property
    def preview(self) -> Optional[TelegramPhotoSize]:
        return self.thumbnail or self.thumb


class TelegramSticker(TelegramMedia):
    emoji: Optional[str] = None


class TelegramMessage(BaseModel):
    """Telegram message (update.message / edited_message / channel_post)."""

    message_id: int
    from_: Optional[TelegramUser] = Field(default=None, alias="from")
    sender_chat: Optional[TelegramChat] = None
    chat: Optional[TelegramChat] = None
    date: int = 0
    edit_date: Optional[int] = None
    message_thread_id: Optional[int] = None
    is_topic_message: Optional[bool] = None
    text: Optional[str] = None
    caption: Optional[str] = None
    entities: Optional[list[TelegramMessageEntity]] = None

    photo: Optional[list[TelegramPhotoSize]] = None
    animation: Optional[TelegramMedia] = None
    video: Optional[TelegramMedia] = None
    video_note: Optional[TelegramMedia] = None
    voice: Optional[TelegramMedia] = None
    audio: Optional[TelegramMedia] = None
    document: Optional[TelegramMedia] = None
    sticker: Optional[TelegramSticker] = None

    reply_to_message: Optional[TelegramMessage] = None
    new_chat_members: Optional[list[TelegramUser]] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def body_text(self) -> str:
        return self.text or self.caption or ""

    def is_service_message(self) -> bool:
        extra = self.model_extra or {}
        return any(extra.get(field) for field in SERVICE_MESSAGE_FIELDS)

    @property
    def quoted_message(self) -> Optional[TelegramMessage]:
        """The replied-to message; forum topic headers do not count as replies."""
        quoted = self.reply_to_message
        if quoted is None or quoted.is_service_message():
            return None
        return quoted


class TelegramReactionType(BaseModel):
    """Reaction entry: `emoji`, `custom_emoji` or `paid`."""

    type: str
    emoji: Optional[str] = None
    custom_emoji_id: Optional[str] = None

    @property
    def key(self) -> Optional[str]:
        if self.type == "emoji":
            return self.emoji
        if self.type == "custom_emoji" and self.custom_emoji_id:
            return f"custom:{self.custom_emoji_id}"
        return None


class TelegramMessageReactionUpdated(BaseModel):
    """update.message_reaction."""

    chat: TelegramChat
    message_id: int
    user: Optional[TelegramUser] = None
    actor_chat: Optional[TelegramChat] = None
    date: int = 0
    old_reaction: list[TelegramReactionType] = Field(default_factory=list)
    new_reaction: list[TelegramReactionType] = Field(default_factory=list)

    @property
    def actor_name(self) -> str:
        if self.user is not None:
            return self.user.full_name or self.user.username or str(self.user.id)
        if self.actor_chat is not None:
            return self.actor_chat.display_name
        return "Unknown"


class TelegramWebhookUpdate(BaseModel):
    """Telegram webhook update payload (root object)."""

    update_id: int
    message: Optional[TelegramMessage] = None
    edited_message: Optional[TelegramMessage] = None
    channel_post: Optional[TelegramMessage] = None
    edited_channel_post: Optional[TelegramMessage] = None
    message_reaction: Optional[TelegramMessageReactionUpdated] = None

    model_config = ConfigDict(extra="allow")
