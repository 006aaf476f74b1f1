"""Tests for CreateTicketCommand."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.commands.ticket_command import CreateTicketCommand
from app.constants.helpdesk import ActivityType, CasePriority, CaseStatus
from app.core.ticket_commands import USAGE_TEXT
from app.models.case import Case, CaseActivity
from app.models.message import Message
from app.schemas.helpdesk import OutboundSendResult
from app.schemas.telegram import TelegramMessage


@pytest.fixture
def adapter():
    adapter = MagicMock()
    adapter.send = AsyncMock(return_value=OutboundSendResult(success=True))
    adapter.get_file_url = AsyncMock(return_value=None)
    return adapter


def command_message(chat_id, quoted=None, text="/ticket"):
    payload = {
        "message_id": 900,
        "chat": {"id": int(chat_id), "type": "private"},
        "from": {"id": 555, "first_name": "Agent", "last_name": "Smith"},
        "date": 1760000000,
        "text": text,
    }
    if quoted is not None:
        payload["reply_to_message"] = quoted
    return TelegramMessage.model_validate(payload)


def quoted_payload(chat_id, message_id=77, text="My card was charged twice"):
    return {
        "message_id": message_id,
        "chat": {"id": int(chat_id), "type": "private"},
        "from": {"id": 789, "first_name": "Client"},
        "date": 1759999000,
        "text": text,
    }


@pytest.mark.asyncio
async def test_usage_without_reply(db, setup_channel, adapter):
    result = await CreateTicketCommand(db, adapter).execute(
        command_message(setup_channel.external_chat_id)
    )

    assert result == {"ok": True, "type": "ticket_usage"}
    assert db.query(Case).count() == 0
    sent = adapter.send.await_args.args[0]
    assert sent.text == USAGE_TEXT
    assert sent.chat_id == setup_channel.external_chat_id


@pytest.mark.asyncio
async def test_creates_ticket_after_current_max(db, setup_channel, setup_case, adapter):
    result = await CreateTicketCommand(db, adapter).execute(
        command_message(
            setup_channel.external_chat_id, quoted_payload(setup_channel.external_chat_id)
        )
    )

    assert result["type"] == "ticket_created"
    assert result["ticket_number"] == setup_case.ticket_number + 1

    case = db.query(Case).filter(Case.ticket_number == result["ticket_number"]).one()
    assert case.title == "My card was charged twice"
    assert case.description == "My card was charged twice"
    assert case.status == CaseStatus.DETECTED.value
    assert case.updated_by == "Agent Smith"

    source = db.query(Message).filter(Message.id == case.source_message_id).one()
    assert source.external_message_id == 77
    assert source.is_from_client is True
    assert source.case_id == case.id

    activity = db.query(CaseActivity).filter(CaseActivity.case_id == case.id).one()
    assert activity.type == ActivityType.CREATED_VIA_COMMAND.value
    assert activity.details["ticket_number"] == case.ticket_number
    assert activity.details["command_text"] == "/ticket"

    sent = adapter.send.await_args.args[0]
    assert f"#{case.ticket_number}" in sent.text
    assert sent.reply_to_message_id == 900


@pytest.mark.asyncio
async def test_existing_case_is_reported(db, setup_channel, setup_client_message, adapter):
    quoted = quoted_payload(
        setup_channel.external_chat_id, message_id=setup_client_message.external_message_id
    )
    command = CreateTicketCommand(db, adapter)
    created = await command.execute(command_message(setup_channel.external_chat_id, quoted))
    again = await command.execute(command_message(setup_channel.external_chat_id, quoted))

    assert created["type"] == "ticket_created"
    assert again == {
        "ok": True,
        "type": "ticket_exists",
        "ticket_number": created["ticket_number"],
    }
    assert db.query(Case).count() == 1
    assert "already exists" in adapter.send.await_args.args[0].text


@pytest.mark.asyncio
async def test_priority_from_urgency(db, setup_channel, setup_client_message, adapter):
    setup_client_message.ai_urgency = 4
    db.commit()
    quoted = quoted_payload(
        setup_channel.external_chat_id, message_id=setup_client_message.external_message_id
    )

    result = await CreateTicketCommand(db, adapter).execute(
        command_message(setup_channel.external_chat_id, quoted)
    )

    case = db.query(Case).filter(Case.ticket_number == result["ticket_number"]).one()
    assert case.priority == CasePriority.URGENT.value
    assert case.title == setup_client_message.text


@pytest.mark.asyncio
async def test_media_without_text_gets_placeholder_title(db, setup_channel, adapter):
    quoted = quoted_payload(setup_channel.external_chat_id, text=None)
    quoted["photo"] = [{"file_id": "p1"}]

    result = await CreateTicketCommand(db, adapter).execute(
        command_message(setup_channel.external_chat_id, quoted)
    )

    case = db.query(Case).filter(Case.ticket_number == result["ticket_number"]).one()
    assert case.title == "Ticket from chat message"
    assert case.description is None


@pytest.mark.asyncio
async def test_send_failure_does_not_fail_command(db, setup_channel, adapter):
    adapter.send = AsyncMock(side_effect=RuntimeError("Telegram down"))
    result = await CreateTicketCommand(db, adapter).execute(
        command_message(
            setup_channel.external_chat_id, quoted_payload(setup_channel.external_chat_id)
        )
    )
    assert result["type"] == "ticket_created"


@pytest.mark.asyncio
async def test_works_without_adapter(db, setup_channel):
    result = await CreateTicketCommand(db, None).execute(
        command_message(
            setup_channel.external_chat_id, quoted_payload(setup_channel.external_chat_id)
        )
    )
    assert result["type"] == "ticket_created"
    assert result["ticket_number"] == 1
