"""
Content classification for inbound Telegram messages.

Precedence: photo > animation > video > video_note > voice > audio >
document > sticker > text. Animation is checked before document because
Telegram also attaches GIFs as documents.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from app.adapters.base import BasePlatformAdapter
from app.adapters.transcription import TranscriptionClient
from app.constants.helpdesk import ContentType
from app.infra.logging_config import get_logger
from app.schemas.helpdesk import ClassifiedContent
from app.schemas.telegram import TelegramMedia, TelegramMessage

logger = get_logger("content_classifier")

FILE_REFERENCE_PREFIX = "tg-file:"

TRANSCRIBABLE_TYPES = (
    ContentType.VOICE,
    ContentType.VIDEO_NOTE,
    ContentType.VIDEO,
    ContentType.AUDIO,
)

DEFAULT_MEDIA_FILE_NAMES = {
    ContentType.VOICE: "voice.ogg",
    ContentType.VIDEO_NOTE: "video_note.mp4",
    ContentType.VIDEO: "video.mp4",
    ContentType.AUDIO: "audio.mp3",
}


def file_reference(file_id: str) -> str:
    """Platform-native fallback stored when a file URL cannot be resolved."""
    return f"{FILE_REFERENCE_PREFIX}{file_id}"


class ContentClassifier:
    """Determines content type and resolves media URLs and transcripts."""

    def __init__(
        self,
        adapter: Optional[BasePlatformAdapter] = None,
        transcriber: Optional[TranscriptionClient] = None,
        transcription_timeout: float = 30.0,
    ) -> None:
        self.adapter = adapter
        self.transcriber = transcriber
        self.transcription_timeout = transcription_timeout

    async def classify(self, message: TelegramMessage) -> ClassifiedContent:
        text = message.body_text or None

        if message.photo:
            largest = message.photo[-1]
            smallest = message.photo[0]
            return ClassifiedContent(
                content_type=ContentType.PHOTO,
                text=text,
                media_file_id=largest.file_id,
                file_size=largest.file_size,
                media_url=await self.resolve_file(largest.file_id),
                thumbnail_url=(
                    await self.resolve_file(smallest.file_id)
                    if smallest.file_id != largest.file_id
                    else None
                ),
            )

        media_fields: tuple[tuple[ContentType, Optional[TelegramMedia]], ...] = (
            (ContentType.ANIMATION, message.animation),
            (ContentType.VIDEO, message.video),
            (ContentType.VIDEO_NOTE, message.video_note),
            (ContentType.VOICE, message.voice),
            (ContentType.AUDIO, message.audio),
            (ContentType.DOCUMENT, message.document),
            (ContentType.STICKER, message.sticker),
        )
        for content_type, media in media_fields:
            if media is None:
                continue
            if content_type == ContentType.STICKER and not text:
                text = getattr(media, "emoji", None)
            preview = media.preview
            content = ClassifiedContent(
                content_type=content_type,
                text=text,
                media_file_id=media.file_id,
                file_name=media.file_name,
                mime_type=media.mime_type,
                file_size=media.file_size,
                media_url=await self.resolve_file(media.file_id),
                thumbnail_url=(
                    await self.resolve_file(preview.file_id) if preview else None
                ),
            )
            if content_type in TRANSCRIBABLE_TYPES:
                content.transcript = await self.transcribe(content)
            return content

        return ClassifiedContent(content_type=ContentType.TEXT, text=text)

    async def resolve_file(self, file_id: str) -> str:
        """Resolve a file handle to a URL, falling back to a `tg-file:` reference."""
        if self.adapter is None:
            return file_reference(file_id)
        try:
            url = await self.adapter.get_file_url(file_id)
        except Exception as e:
            logger.exception("Media resolution failed for %s: %s", file_id, e)
            url = None
        return url or file_reference(file_id)

    async def transcribe(self, content: ClassifiedContent) -> Optional[str]:
        """Await the transcription service for a resolved audio/video URL."""
        if self.transcriber is None or not self.transcriber.enabled:
            return None
        url = content.media_url or ""
        if not url.startswith(("http://", "https://")):
            return None
        file_name = content.file_name or DEFAULT_MEDIA_FILE_NAMES.get(
            content.content_type, "media"
        )
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.transcriber.transcribe, url, file_name),
                timeout=self.transcription_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Transcription timed out for %s", content.media_file_id)
        except Exception as e:
            logger.exception(
                "Transcription failed for %s: %s", content.media_file_id, e
            )
        return None
