"""Tests for ContentClassifier."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.constants.helpdesk import ContentType
from app.schemas.telegram import TelegramMessage
from app.services.content_classifier import ContentClassifier, file_reference


def make_message(**fields):
    payload = {
        "message_id": 1,
        "chat": {"id": 789, "type": "private"},
        "from": {"id": 789, "first_name": "Test"},
        "date": 1609459200,
    }
    payload.update(fields)
    return TelegramMessage.model_validate(payload)


@pytest.fixture
def adapter():
    adapter = MagicMock()
    adapter.get_file_url = AsyncMock(
        side_effect=lambda file_id: f"https://files.example/{file_id}"
    )
    return adapter


@pytest.mark.asyncio
async def test_plain_text():
    content = await ContentClassifier().classify(make_message(text="hello"))
    assert content.content_type == ContentType.TEXT
    assert content.text == "hello"
    assert content.media_url is None


@pytest.mark.asyncio
async def test_photo_uses_largest_and_smallest(adapter):
    message = make_message(
        caption="screenshot",
        photo=[
            {"file_id": "small", "width": 90, "height": 90},
            {"file_id": "large", "width": 1280, "height": 1280, "file_size": 2048},
        ],
    )
    content = await ContentClassifier(adapter=adapter).classify(message)
    assert content.content_type == ContentType.PHOTO
    assert content.text == "screenshot"
    assert content.media_file_id == "large"
    assert content.file_size == 2048
    assert content.media_url == "https://files.example/large"
    assert content.thumbnail_url == "https://files.example/small"


@pytest.mark.asyncio
async def test_animation_checked_before_document(adapter):
    message = make_message(
        animation={"file_id": "anim", "mime_type": "video/mp4"},
        document={"file_id": "anim", "file_name": "giphy.mp4"},
    )
    content = await ContentClassifier(adapter=adapter).classify(message)
    assert content.content_type == ContentType.ANIMATION


@pytest.mark.asyncio
async def test_document_keeps_file_details(adapter):
    message = make_message(
        document={
            "file_id": "doc",
            "file_name": "invoice.pdf",
            "mime_type": "application/pdf",
            "file_size": 1000,
            "thumbnail": {"file_id": "doc-thumb"},
        }
    )
    content = await ContentClassifier(adapter=adapter).classify(message)
    assert content.content_type == ContentType.DOCUMENT
    assert content.file_name == "invoice.pdf"
    assert content.mime_type == "application/pdf"
    assert content.thumbnail_url == "https://files.example/doc-thumb"


@pytest.mark.asyncio
async def test_unresolved_url_falls_back_to_reference():
    adapter = MagicMock()
    adapter.get_file_url = AsyncMock(return_value=None)
    message = make_message(video={"file_id": "vid"})
    content = await ContentClassifier(adapter=adapter).classify(message)
    assert content.content_type == ContentType.VIDEO
    assert content.media_url == file_reference("vid") == "tg-file:vid"


@pytest.mark.asyncio
async def test_resolver_error_falls_back_to_reference():
    adapter = MagicMock()
    adapter.get_file_url = AsyncMock(side_effect=RuntimeError("network down"))
    message = make_message(voice={"file_id": "v1"})
    content = await ContentClassifier(adapter=adapter).classify(message)
    assert content.media_url == "tg-file:v1"


@pytest.mark.asyncio
async def test_sticker_uses_emoji_as_text():
    message = make_message(sticker={"file_id": "st", "emoji": "👍"})
    content = await ContentClassifier().classify(message)
    assert content.content_type == ContentType.STICKER
    assert content.text == "👍"


@pytest.mark.asyncio
async def test_voice_is_transcribed(adapter):
    transcriber = MagicMock()
    transcriber.enabled = True
    transcriber.transcribe.return_value = "завтра с утра посмотрю"
    message = make_message(voice={"file_id": "v1", "duration": 3})

    content = await ContentClassifier(
        adapter=adapter, transcriber=transcriber
    ).classify(message)

    assert content.content_type == ContentType.VOICE
    assert content.transcript == "завтра с утра посмотрю"
    assert content.effective_text == "завтра с утра посмотрю"
    transcriber.transcribe.assert_called_once_with(
        "https://files.example/v1", "voice.ogg"
    )


@pytest.mark.asyncio
async def test_transcription_skipped_without_http_url():
    transcriber = MagicMock()
    transcriber.enabled = True
    message = make_message(voice={"file_id": "v1"})
    content = await ContentClassifier(transcriber=transcriber).classify(message)
    assert content.transcript is None
    transcriber.transcribe.assert_not_called()


@pytest.mark.asyncio
async def test_transcription_failure_is_ignored(adapter):
    transcriber = MagicMock()
    transcriber.enabled = True
    transcriber.transcribe.side_effect = RuntimeError("service down")
    message = make_message(audio={"file_id": "a1", "file_name": "call.mp3"})
    content = await ContentClassifier(adapter=adapter, transcriber=transcriber).classify(
        message
    )
    assert content.content_type == ContentType.AUDIO
    assert content.transcript is None
