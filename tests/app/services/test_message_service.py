"""Tests for MessageService."""

from datetime import datetime, timedelta, timezone

import pytest

from app.constants.helpdesk import ContentType, UserRole
from app.models.message import Message
from app.schemas.helpdesk import ClassifiedContent, ReplyInfo, SenderInfo
from app.services.message_service import MessageService, build_preview


@pytest.fixture
def client_sender(faker):
    return SenderInfo(external_id="789", name=faker.name(), username="client")


@pytest.fixture
def staff_sender(faker):
    return SenderInfo(external_id="555", name=faker.name(), username="agent")


def text(value):
    return ClassifiedContent(content_type=ContentType.TEXT, text=value)


def test_first_client_message(db, setup_channel, client_sender):
    service = MessageService(db)
    msg = service.persist_message(
        setup_channel, 1, client_sender, UserRole.CLIENT, text("Hello, I need help")
    )

    assert msg is not None
    assert msg.is_from_client is True
    assert msg.sender_role == UserRole.CLIENT.value
    assert setup_channel.unread_count == 1
    assert setup_channel.awaiting_reply is True
    assert setup_channel.last_sender_name == client_sender.name
    assert setup_channel.last_message_preview == "Hello, I need help"
    assert setup_channel.last_client_message_at is not None
    assert msg.response_time_ms is None


def test_duplicate_delivery_is_ignored(db, setup_channel, client_sender):
    service = MessageService(db)
    service.persist_message(setup_channel, 1, client_sender, UserRole.CLIENT, text("hi"))
    duplicate = service.persist_message(
        setup_channel, 1, client_sender, UserRole.CLIENT, text("hi")
    )

    assert duplicate is None
    db.refresh(setup_channel)
    assert setup_channel.unread_count == 1
    assert db.query(Message).count() == 1


def test_team_reply_marks_client_messages_read(
    db, setup_channel, client_sender, staff_sender
):
    service = MessageService(db)
    service.persist_message(setup_channel, 1, client_sender, UserRole.CLIENT, text("a"))
    service.persist_message(setup_channel, 2, client_sender, UserRole.CLIENT, text("b"))
    assert setup_channel.unread_count == 2

    reply = service.persist_message(
        setup_channel, 3, staff_sender, UserRole.EMPLOYEE, text("On it")
    )

    assert reply.is_from_client is False
    assert reply.is_read is True
    assert setup_channel.unread_count == 0
    assert setup_channel.awaiting_reply is False
    assert setup_channel.last_agent_message_at is not None
    assert setup_channel.last_team_message_at is not None
    unread = (
        db.query(Message)
        .filter(Message.channel_id == setup_channel.id, Message.is_read.is_(False))
        .count()
    )
    assert unread == 0


def test_client_response_time_average(db, setup_channel, client_sender, staff_sender):
    service = MessageService(db)
    start = datetime(2026, 3, 10, 10, 0, tzinfo=timezone.utc)
    service.persist_message(
        setup_channel, 1, staff_sender, UserRole.EMPLOYEE, text("How can I help?"), now=start
    )

    first = service.persist_message(
        setup_channel,
        2,
        client_sender,
        UserRole.CLIENT,
        text("My order is late"),
        now=start + timedelta(seconds=60),
    )
    second = service.persist_message(
        setup_channel,
        3,
        client_sender,
        UserRole.CLIENT,
        text("Any news?"),
        now=start + timedelta(seconds=120),
    )

    assert first.response_time_ms == 60000
    assert second.response_time_ms == 120000
    assert setup_channel.client_response_count == 2
    assert setup_channel.client_avg_response_ms == pytest.approx(90000)


def test_reply_and_thread_are_stored(db, setup_channel, client_sender):
    msg = MessageService(db).persist_message(
        setup_channel,
        10,
        client_sender,
        UserRole.CLIENT,
        text("see above"),
        reply=ReplyInfo(message_id=7, text="original", sender_name="Ann"),
        thread_id=3,
    )
    assert msg.reply_to_message_id == 7
    assert msg.reply_to_text == "original"
    assert msg.reply_to_sender == "Ann"
    assert msg.thread_id == 3


def test_preview_placeholder_for_media(db, setup_channel, client_sender):
    content = ClassifiedContent(content_type=ContentType.PHOTO, media_url="tg-file:x")
    MessageService(db).persist_message(
        setup_channel, 1, client_sender, UserRole.CLIENT, content
    )
    assert setup_channel.last_message_preview == "[photo]"


def test_build_preview():
    assert build_preview(text("x" * 150), 100) == "x" * 100
    voice = ClassifiedContent(content_type=ContentType.VOICE, transcript="call me")
    assert build_preview(voice, 100) == "[voice] call me"
    document = ClassifiedContent(content_type=ContentType.DOCUMENT, file_name="a.pdf")
    assert build_preview(document, 100) == "[document] a.pdf"
    assert build_preview(ClassifiedContent(content_type=ContentType.STICKER), 100) == (
        "[sticker]"
    )


def test_insert_message_is_idempotent(db, setup_channel, client_sender):
    service = MessageService(db)
    created_at = datetime(2026, 1, 1, tzinfo=timezone.utc)
    msg = service.insert_message(
        setup_channel, 5, client_sender, UserRole.CLIENT, text("q"), created_at=created_at
    )
    assert msg is not None
    assert service.insert_message(
        setup_channel, 5, client_sender, UserRole.CLIENT, text("q")
    ) is None
    db.refresh(setup_channel)
    assert setup_channel.unread_count == 0


def test_update_edited_message(db, setup_client_message):
    service = MessageService(db)
    updated = service.update_edited_message(
        setup_client_message.channel_id,
        setup_client_message.external_message_id,
        "corrected text",
    )
    assert updated.text == "corrected text"
    assert updated.is_edited is True
    assert service.update_edited_message(setup_client_message.channel_id, -1, "x") is None
