"""Adapters for the chat platform and external HTTP collaborators."""

from app.adapters.analysis import AnalysisClient
from app.adapters.base import BasePlatformAdapter
from app.adapters.telegram import TelegramAdapter
from app.adapters.transcription import TranscriptionClient

__all__ = [
    "AnalysisClient",
    "BasePlatformAdapter",
    "TelegramAdapter",
    "TranscriptionClient",
]
