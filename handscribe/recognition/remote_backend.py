"""Remote Recognition Service backend."""

import asyncio
import base64
import logging
from typing import Optional, Dict, Any

import aiohttp

from .base import AbstractRecognitionBackend
from ..exceptions import RecognitionError
from ..models.image import ImageSource

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://toolkit.rork.com/text/llm/"

SYSTEM_PROMPT = (
    "You are an OCR (Optical Character Recognition) expert. Your task is to "
    "accurately extract and transcribe text from images. Respond only with the "
    "extracted text, nothing else. Preserve the formatting where possible."
)
USER_PROMPT = "Please extract and transcribe all text from this image:"


class RemoteRecognitionBackend(AbstractRecognitionBackend):
    """Sends images to the Recognition Service and returns its transcription."""

    service_name = "remote"

    def __init__(self,
                 endpoint: str = DEFAULT_ENDPOINT,
                 timeout_seconds: Optional[float] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        """Initialize remote recognition backend.

        Args:
            endpoint: URL of the Recognition Service
            timeout_seconds: Total request timeout; None waits indefinitely
            session: Shared aiohttp session; one is opened per call if omitted
        """
        self.endpoint = endpoint
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session

        logger.info(f"RemoteRecognitionBackend initialized with endpoint: {endpoint}")

    def build_payload(self, image_base64: str) -> Dict[str, Any]:
        """Build the message list sent to the Recognition Service."""
        return {
            "messages": [
                {
                    "role": "system",
                    "content": SYSTEM_PROMPT
                },
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": USER_PROMPT},
                        {"type": "image", "image": image_base64}
                    ]
                }
            ]
        }

    async def recognize(self, image_bytes: bytes) -> str:
        """Send image bytes to the Recognition Service.

        Args:
            image_bytes: Raw image data

        Returns:
            Trimmed transcription text

        Raises:
            RecognitionError: On transport failure, non-2xx status or malformed body
        """
        payload = self.build_payload(base64.b64encode(image_bytes).decode("ascii"))
        logger.debug(f"Posting {len(image_bytes)} image bytes to {self.endpoint}")

        try:
            if self._session is not None:
                return await self._post(self._session, payload)
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                return await self._post(session, payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Recognition request to {self.endpoint} failed: {e!r}")
            raise RecognitionError(f"Recognition request failed: {e}") from e

    async def _post(self, session: aiohttp.ClientSession, payload: Dict[str, Any]) -> str:
        headers = {"Content-Type": "application/json"}

        async with session.post(self.endpoint, headers=headers, json=payload,
                                timeout=self.timeout) as response:
            if not 200 <= response.status < 300:
                error_text = await response.text()
                logger.error(f"Recognition Service error: {response.status} - {error_text}")
                raise RecognitionError(
                    f"Recognition request failed with status {response.status}")

            try:
                result = await response.json(content_type=None)
            except ValueError as e:
                raise RecognitionError(f"Recognition Service returned invalid JSON: {e}") from e

        if not isinstance(result, dict) or not isinstance(result.get("completion"), str):
            raise RecognitionError("Recognition Service response has no 'completion' text")

        text = result["completion"].strip()
        if not text:
            raise RecognitionError("Recognition Service returned no text")
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise RecognitionError(f"Recognition Service returned text that is not valid Unicode: {e}") from e
        return text

    async def transcribe(self, image: Optional[ImageSource]) -> str:
        if image is None:
            raise RecognitionError("Remote recognition requires an image")
        return await self.recognize(image.data)
