"""Pipeline facade composing the processing controller and the history store."""

import logging
from typing import Optional

from ..config import HandscribeConfig
from ..models.image import ImageSource
from ..models.run_state import RunState
from ..models.transcription import TranscriptionRecord
from ..publisher import RunStatePublisher
from ..recognition import (
    AbstractRecognitionBackend,
    OfflineRecognitionBackend,
    RemoteRecognitionBackend,
)
from ..storage import HistoryQuery, HistoryStore, JsonFileSlotStorage
from .processing_controller import ProcessingController

logger = logging.getLogger(__name__)


class TranscriptionPipeline:
    """Turns images into history records.

    A record is inserted into history only when recognition reports success;
    failed runs leave the store untouched.
    """

    def __init__(self,
                 store: HistoryStore,
                 publisher: Optional[RunStatePublisher] = None):
        """Initialize pipeline.

        Args:
            store: History store receiving successful transcriptions
            publisher: Run-state publisher handed to the controller
        """
        self.store = store
        self.controller = ProcessingController(record_factory=store.insert,
                                               publisher=publisher)
        logger.info(f"TranscriptionPipeline initialized ({store.size()} records in history)")

    @classmethod
    def from_config(cls, config: HandscribeConfig) -> "TranscriptionPipeline":
        """Build a pipeline persisting history under the configured data directory."""
        storage = JsonFileSlotStorage(config.get_data_directory())
        store = HistoryStore(
            storage,
            key=config.get('storage.history_key', 'ocr-history'),
            timestamp_format=config.get('history.timestamp_format', '%H:%M'),
        )
        return cls(store)

    async def run(self,
                  backend: AbstractRecognitionBackend,
                  image: Optional[ImageSource] = None) -> TranscriptionRecord:
        """Recognize an image and record the result in history.

        Args:
            backend: Remote or offline recognition strategy
            image: Image to transcribe, or None for the offline path

        Returns:
            The record inserted into history

        Raises:
            RecognitionInProgressError: If a run is already in flight
            RecognitionError: If recognition failed; history is unchanged
            PersistenceWriteError: If the record could not be saved
        """
        return await self.controller.start_recognition(backend, image)

    @property
    def state(self) -> RunState:
        return self.controller.state

    @property
    def history(self) -> HistoryStore:
        return self.store

    def search(self, substring: str = "") -> HistoryQuery:
        return self.store.query(substring)

    def clear_history(self) -> int:
        return self.store.clear()


def create_backend(config: HandscribeConfig,
                   offline: bool = False,
                   seed: Optional[int] = None) -> AbstractRecognitionBackend:
    """Create the recognition backend the caller asked for.

    Args:
        config: Application configuration
        offline: Use the canned-document backend instead of the remote service
        seed: Seed for the offline backend (overrides config)

    Returns:
        Recognition backend
    """
    if offline:
        return OfflineRecognitionBackend(
            delay_seconds=config.get('recognition.offline_delay_seconds', 1.5),
            seed=seed if seed is not None else config.get('recognition.seed'),
        )

    return RemoteRecognitionBackend(
        endpoint=config.get('recognition.endpoint'),
        timeout_seconds=config.get('recognition.timeout_seconds'),
    )
