"""
Handscribe - image text extraction with a searchable history.

Images are sent to a Recognition Service (or a canned offline backend), and
every successful transcription is stored in a persisted, newest-first history.
"""

from handscribe.config import HandscribeConfig
from handscribe.exceptions import (
    HandscribeError,
    ConfigurationError,
    RecognitionError,
    ImageReadError,
    RecognitionInProgressError,
    PersistenceError,
    PersistenceReadError,
    PersistenceWriteError,
)
from handscribe.models import TranscriptionRecord, RunStatus, RunState, ImageSource
from handscribe.recognition import (
    AbstractRecognitionBackend,
    RemoteRecognitionBackend,
    OfflineRecognitionBackend,
)
from handscribe.storage import HistoryStore, JsonFileSlotStorage, InMemorySlotStorage
from handscribe.services import ProcessingController, TranscriptionPipeline, create_backend

__version__ = "0.1.0"

__all__ = [
    "HandscribeConfig",
    # Exceptions
    "HandscribeError",
    "ConfigurationError",
    "RecognitionError",
    "ImageReadError",
    "RecognitionInProgressError",
    "PersistenceError",
    "PersistenceReadError",
    "PersistenceWriteError",
    # Models
    "TranscriptionRecord",
    "RunStatus",
    "RunState",
    "ImageSource",
    # Recognition
    "AbstractRecognitionBackend",
    "RemoteRecognitionBackend",
    "OfflineRecognitionBackend",
    # Storage
    "HistoryStore",
    "JsonFileSlotStorage",
    "InMemorySlotStorage",
    # Services
    "ProcessingController",
    "TranscriptionPipeline",
    "create_backend",
]
