"""Tests for TelegramAdapter."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from telegram.error import TelegramError

from app.adapters.telegram import (
    TelegramAdapter,
    reply_from_message,
    secret_header_matches,
    sender_from_message,
)
from app.schemas.helpdesk import OutboundMessage, OutboundSendResult
from app.schemas.telegram import TelegramMessage

# Token format: digits:rest (e.g. 123456:ABC). No real API calls are made.
FAKE_TOKEN = "123456:AAHdqTcvCH1vGWJxfSeofSAs0K5P"


@pytest.fixture
def telegram_adapter():
    return TelegramAdapter(bot_token=FAKE_TOKEN)


def test_secret_not_configured_accepts_any_header():
    assert secret_header_matches(None, {}) is True
    assert secret_header_matches("", {"X-Telegram-Bot-Api-Secret-Token": "x"}) is True


def test_secret_header_mismatch():
    assert secret_header_matches("secret", {"X-Telegram-Bot-Api-Secret-Token": "wrong"}) is False
    assert secret_header_matches("secret", {}) is False


def test_secret_header_case_insensitive():
    """Headers are case-insensitive; Starlette/FastAPI lowercases them."""
    assert secret_header_matches(
        "my-secret", {"x-telegram-bot-api-secret-token": "my-secret"}
    )
    assert secret_header_matches(
        "my-secret", {"X-TELEGRAM-BOT-API-SECRET-TOKEN": "my-secret"}
    )
    assert not secret_header_matches("my-secret", None)


@pytest.mark.asyncio
async def test_get_file_url_builds_download_url(telegram_adapter):
    tg_file = MagicMock()
    tg_file.file_path = "voice/file_1.oga"
    mock_bot = MagicMock()
    mock_bot.get_file = AsyncMock(return_value=tg_file)

    with patch.object(telegram_adapter, "_get_bot", return_value=mock_bot):
        url = await telegram_adapter.get_file_url("abc")

    assert url == f"https://api.telegram.org/file/bot{FAKE_TOKEN}/voice/file_1.oga"


@pytest.mark.asyncio
async def test_get_file_url_keeps_absolute_path(telegram_adapter):
    tg_file = MagicMock()
    tg_file.file_path = "https://api.telegram.org/file/botX/photos/p.jpg"
    mock_bot = MagicMock()
    mock_bot.get_file = AsyncMock(return_value=tg_file)

    with patch.object(telegram_adapter, "_get_bot", return_value=mock_bot):
        url = await telegram_adapter.get_file_url("abc")

    assert url == "https://api.telegram.org/file/botX/photos/p.jpg"


@pytest.mark.asyncio
async def test_get_file_url_returns_none_on_error(telegram_adapter):
    mock_bot = MagicMock()
    mock_bot.get_file = AsyncMock(side_effect=TelegramError("file is too big"))

    with patch.object(telegram_adapter, "_get_bot", return_value=mock_bot):
        assert await telegram_adapter.get_file_url("abc") is None


@pytest.mark.asyncio
async def test_get_file_url_times_out():
    adapter = TelegramAdapter(bot_token=FAKE_TOKEN, timeout_seconds=0.01)

    async def slow_get_file(file_id):
        await asyncio.sleep(1)

    mock_bot = MagicMock()
    mock_bot.get_file = slow_get_file

    with patch.object(adapter, "_get_bot", return_value=mock_bot):
        assert await adapter.get_file_url("abc") is None


@pytest.mark.asyncio
async def test_get_chat_photo_url(telegram_adapter):
    chat = MagicMock()
    chat.photo.big_file_id = "big"
    mock_bot = MagicMock()
    mock_bot.get_chat = AsyncMock(return_value=chat)

    with patch.object(telegram_adapter, "_get_bot", return_value=mock_bot), patch.object(
        telegram_adapter, "get_file_url", AsyncMock(return_value="https://x/big.jpg")
    ) as mock_file_url:
        url = await telegram_adapter.get_chat_photo_url("-100123")

    assert url == "https://x/big.jpg"
    mock_file_url.assert_awaited_once_with("big")


@pytest.mark.asyncio
async def test_send_returns_result(telegram_adapter):
    """Send returns OutboundSendResult; mocks Bot API to avoid real calls."""
    outbound = OutboundMessage(chat_id="123", text="hi", reply_to_message_id=9)
    mock_msg = MagicMock()
    mock_msg.message_id = 42
    mock_bot = MagicMock()
    mock_bot.send_message = AsyncMock(return_value=mock_msg)

    with patch.object(telegram_adapter, "_get_bot", return_value=mock_bot):
        result = await telegram_adapter.send(outbound)

    assert isinstance(result, OutboundSendResult)
    assert result.success is True
    assert result.platform_message_id == "42"
    mock_bot.send_message.assert_awaited_once_with(
        chat_id="123", text="hi", reply_to_message_id=9
    )


def test_sender_from_user():
    message = TelegramMessage.model_validate(
        {
            "message_id": 1,
            "chat": {"id": 1, "type": "private"},
            "from": {"id": 789, "first_name": "Test", "last_name": "User", "username": "tu"},
        }
    )
    sender = sender_from_message(message)
    assert sender.external_id == "789"
    assert sender.name == "Test User"
    assert sender.username == "tu"


def test_sender_from_channel_post():
    message = TelegramMessage.model_validate(
        {
            "message_id": 1,
            "chat": {"id": -100, "type": "channel", "title": "News"},
            "sender_chat": {"id": -100, "type": "channel", "title": "News"},
        }
    )
    sender = sender_from_message(message)
    assert sender.external_id is None
    assert sender.name == "News"


def test_no_sender():
    message = TelegramMessage.model_validate(
        {"message_id": 1, "chat": {"id": 1, "type": "private"}}
    )
    assert sender_from_message(message) is None


def test_reply_ignores_forum_topic_header():
    message = TelegramMessage.model_validate(
        {
            "message_id": 5,
            "chat": {"id": -100, "type": "supergroup", "is_forum": True},
            "from": {"id": 1, "first_name": "A"},
            "text": "hi",
            "reply_to_message": {
                "message_id": 2,
                "chat": {"id": -100, "type": "supergroup"},
                "forum_topic_created": {"name": "Billing", "icon_color": 1},
            },
        }
    )
    assert reply_from_message(message) is None


def test_reply_info():
    message = TelegramMessage.model_validate(
        {
            "message_id": 5,
            "chat": {"id": 1, "type": "private"},
            "from": {"id": 1, "first_name": "A"},
            "text": "agreed",
            "reply_to_message": {
                "message_id": 2,
                "chat": {"id": 1, "type": "private"},
                "from": {"id": 2, "first_name": "B"},
                "caption": "see photo",
            },
        }
    )
    reply = reply_from_message(message)
    assert reply.message_id == 2
    assert reply.text == "see photo"
    assert reply.sender_name == "B"
