"""Processing controller driving the single-request recognition state machine."""

import asyncio
import logging
from typing import Callable, Optional

from ..exceptions import RecognitionError, RecognitionInProgressError, PersistenceWriteError
from ..models.image import ImageSource
from ..models.run_state import RunState, RunStatus
from ..models.transcription import TranscriptionRecord
from ..publisher import RunStatePublisher
from ..recognition.base import AbstractRecognitionBackend

logger = logging.getLogger(__name__)

RecordFactory = Callable[[str, Optional[str]], TranscriptionRecord]


class ProcessingController:
    """Runs at most one recognition at a time.

    Each run moves IDLE -> PROCESSING -> SUCCEEDED | FAILED. A start issued
    while PROCESSING is rejected; nothing is queued or cancelled.
    """

    def __init__(self,
                 record_factory: RecordFactory = TranscriptionRecord.create,
                 publisher: Optional[RunStatePublisher] = None):
        """Initialize processing controller.

        Args:
            record_factory: Turns (text, image_ref) into a record. The default
                            only builds the record; the pipeline passes
                            HistoryStore.insert so success also persists it.
            publisher: Publisher notified on every state transition
        """
        self.record_factory = record_factory
        self._publisher = publisher or RunStatePublisher()
        self._state = RunState.idle()

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_processing(self) -> bool:
        return self._state.status is RunStatus.PROCESSING

    def _transition(self, state: RunState) -> None:
        logger.info(f"Run state: {self._state.status.value} -> {state.status.value}")
        self._state = state
        self._publisher.publish_state(state)

    async def start_recognition(self,
                                backend: AbstractRecognitionBackend,
                                image: Optional[ImageSource] = None) -> TranscriptionRecord:
        """Run one recognition to completion.

        Args:
            backend: Recognition strategy chosen by the caller
            image: Image to transcribe, or None for the no-image path

        Returns:
            The record produced for the recognized text

        Raises:
            RecognitionInProgressError: If a recognition is already running
            RecognitionError: If the backend failed (state becomes FAILED)
            PersistenceWriteError: If the record could not be saved (state becomes FAILED)
        """
        # Checked and set before the first await, so no other start can slip in
        if self.is_processing:
            raise RecognitionInProgressError("A recognition is already in progress")

        running = RunState.processing()
        image_ref = image.uri if image is not None else None
        try:
            self._transition(running)
            text = await backend.transcribe(image)
            record = self.record_factory(text, image_ref)
        except (RecognitionError, PersistenceWriteError) as e:
            logger.error(f"Recognition via {backend.service_name} failed: {e}")
            self._transition(running.failed(str(e)))
            raise
        except asyncio.CancelledError:
            logger.warning(f"Recognition via {backend.service_name} was cancelled")
            self._transition(running.failed("Recognition cancelled"))
            raise
        except Exception as e:
            logger.error(f"Unexpected error during recognition: {e}", exc_info=True)
            self._transition(running.failed(f"Unexpected error: {e}"))
            raise

        self._transition(running.succeeded(record))
        return record

    def reset(self) -> None:
        """Return a finished run to IDLE."""
        if self.is_processing:
            raise RecognitionInProgressError("Cannot reset while a recognition is in progress")
        if self._state.is_terminal:
            self._transition(RunState.idle())
