"""Data models for the Handscribe application."""

from .transcription import TranscriptionRecord, PersistedRecord
from .run_state import RunStatus, RunState
from .image import ImageSource

__all__ = [
    "TranscriptionRecord",
    "PersistedRecord",
    "RunStatus",
    "RunState",
    "ImageSource",
]
