"""Enumerations shared by the helpdesk models, services and commands."""

from enum import StrEnum


class ChannelType(StrEnum):
    """Channel audience: one-to-one client chats or partner groups."""

    CLIENT = "client"
    PARTNER = "partner"


class UserRole(StrEnum):
    """Role of a chat participant."""

    CLIENT = "client"
    EMPLOYEE = "employee"
    PARTNER = "partner"


class RoleMethod(StrEnum):
    """How a participant's role was determined."""

    NAME_PATTERN = "name_pattern"
    EXTERNAL_ID = "external_id"
    USERNAME = "username"
    DEFAULT = "default"


class ContentType(StrEnum):
    """Content type tags, in classification precedence order."""

    PHOTO = "photo"
    ANIMATION = "animation"
    VIDEO = "video"
    VIDEO_NOTE = "video_note"
    VOICE = "voice"
    AUDIO = "audio"
    DOCUMENT = "document"
    STICKER = "sticker"
    TEXT = "text"


class CaseStatus(StrEnum):
    DETECTED = "detected"
    IN_PROGRESS = "in_progress"
    WAITING = "waiting"
    RESOLVED = "resolved"


OPEN_CASE_STATUSES = (CaseStatus.DETECTED, CaseStatus.IN_PROGRESS, CaseStatus.WAITING)


class CasePriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ActivityType(StrEnum):
    """Case activity log entry types."""

    REPLIED = "replied"
    RESOLVED = "resolved"
    CREATED_VIA_COMMAND = "created_via_command"


class CommitmentType(StrEnum):
    TIME = "time"
    ACTION = "action"
    VAGUE = "vague"


class CommitmentStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
