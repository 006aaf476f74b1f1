"""Client for the speech-to-text service (OpenAI compatible transcription API)."""

from __future__ import annotations

from typing import Optional

import requests

from app.config import get_settings
from app.infra.logging_config import get_logger

logger = get_logger("transcription")

MAX_AUDIO_BYTES = 25 * 1024 * 1024


class TranscriptionClient:
    """Downloads an audio file and posts it to the transcription endpoint."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.api_url = api_url or settings.transcription_api_url
        self.api_key = api_key or settings.transcription_api_key
        self.model = model or settings.transcription_model
        self.timeout = timeout_seconds or settings.transcription_timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.api_url)

    def transcribe(self, audio_url: str, file_name: str = "audio.ogg") -> Optional[str]:
        """
        Return the transcribed text, or None when the service is not configured,
        the download fails, or the service answers with an error.
        """
        if not self.enabled:
            return None

        try:
            audio = requests.get(audio_url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Audio download failed for %s: %s", file_name, e)
            return None
        if audio.status_code != 200:
            logger.warning(
                "Audio download returned HTTP %s for %s", audio.status_code, file_name
            )
            return None
        if len(audio.content) > MAX_AUDIO_BYTES:
            logger.info("Skipping transcription of %s: file too large", file_name)
            return None

        headers: dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            resp = requests.post(
                self.api_url,
                headers=headers,
                data={"model": self.model},
                files={"file": (file_name, audio.content)},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Transcription request failed: %s", e)
            return None

        if resp.status_code != 200:
            logger.warning(
                "Transcription returned HTTP %s: %s",
                resp.status_code,
                resp.text[:500] if resp.text else "no body",
            )
            return None
        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("Transcription returned invalid JSON: %s", e)
            return None
        text = (data.get("text") or "").strip() if isinstance(data, dict) else ""
        return text or None
