"""Abstract base class for recognition backends."""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from ..models.image import ImageSource

logger = logging.getLogger(__name__)


class AbstractRecognitionBackend(ABC):
    """Strategy used by the pipeline to turn an image into text.

    The caller picks the concrete backend (remote or offline) from its own
    capabilities; the pipeline never branches on platform.
    """

    service_name = "abstract"

    @abstractmethod
    async def transcribe(self, image: Optional[ImageSource]) -> str:
        """Extract text from an image.

        Args:
            image: Image to transcribe, or None on the no-image path

        Returns:
            Non-empty transcription text

        Raises:
            RecognitionError: If the text could not be obtained
        """
        pass
