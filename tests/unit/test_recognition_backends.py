"""Unit tests for recognition backends."""

import asyncio
import base64
import random
import time
import pytest
from unittest.mock import AsyncMock, patch

import aiohttp

from handscribe.exceptions import RecognitionError
from handscribe.models import ImageSource
from handscribe.recognition import (
    RemoteRecognitionBackend,
    OfflineRecognitionBackend,
    CANNED_DOCUMENTS,
)
from handscribe.recognition.remote_backend import SYSTEM_PROMPT, USER_PROMPT


@pytest.mark.unit
class TestRemoteRecognitionBackend:

    def test_returns_trimmed_completion(self, fake_session_factory):
        session = fake_session_factory(body={"completion": "  Hello world\n"})
        backend = RemoteRecognitionBackend(endpoint="https://ocr.test/llm/", session=session)

        text = asyncio.run(backend.recognize(b"image-bytes"))

        assert text == "Hello world"

    def test_request_payload(self, fake_session_factory):
        session = fake_session_factory(body={"completion": "ok"})
        backend = RemoteRecognitionBackend(endpoint="https://ocr.test/llm/", session=session)

        asyncio.run(backend.recognize(b"image-bytes"))

        assert len(session.calls) == 1
        url, kwargs = session.calls[0]
        assert url == "https://ocr.test/llm/"
        assert kwargs["headers"]["Content-Type"] == "application/json"

        system, user = kwargs["json"]["messages"]
        assert system == {"role": "system", "content": SYSTEM_PROMPT}
        assert user["role"] == "user"
        assert user["content"][0] == {"type": "text", "text": USER_PROMPT}
        assert user["content"][1]["type"] == "image"
        assert base64.b64decode(user["content"][1]["image"]) == b"image-bytes"

    def test_no_timeout_by_default(self):
        backend = RemoteRecognitionBackend()
        assert backend.timeout.total is None

    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    def test_non_success_status(self, fake_session_factory, status):
        session = fake_session_factory(status=status, raw="server says no")
        backend = RemoteRecognitionBackend(session=session)

        with pytest.raises(RecognitionError, match=str(status)):
            asyncio.run(backend.recognize(b"x"))

    @pytest.mark.parametrize("raw", [
        "not json at all",
        '["completion"]',
        '{"text": "wrong field"}',
        '{"completion": 42}',
        '{"completion": "   "}',
    ])
    def test_malformed_body(self, fake_session_factory, raw):
        backend = RemoteRecognitionBackend(session=fake_session_factory(raw=raw))

        with pytest.raises(RecognitionError):
            asyncio.run(backend.recognize(b"x"))

    @pytest.mark.parametrize("error", [
        aiohttp.ClientConnectionError("connection refused"),
        asyncio.TimeoutError(),
    ])
    def test_transport_failure(self, fake_session_factory, error):
        backend = RemoteRecognitionBackend(session=fake_session_factory(error=error))

        with pytest.raises(RecognitionError):
            asyncio.run(backend.recognize(b"x"))

    def test_rejects_invalid_unicode_completion(self, fake_session_factory):
        session = fake_session_factory(body={"completion": "x \ud800 y"})
        backend = RemoteRecognitionBackend(endpoint="https://ocr.test/llm/", session=session)

        with pytest.raises(RecognitionError, match="not valid Unicode"):
            asyncio.run(backend.recognize(b"image-bytes"))

    def test_transcribe_uses_image_bytes(self, fake_session_factory):
        session = fake_session_factory(body={"completion": "scanned"})
        backend = RemoteRecognitionBackend(session=session)
        image = ImageSource(uri="file:///note.png", data=b"png")

        assert asyncio.run(backend.transcribe(image)) == "scanned"
        payload_image = session.calls[0][1]["json"]["messages"][1]["content"][1]["image"]
        assert payload_image == base64.b64encode(b"png").decode("ascii")

    def test_transcribe_requires_image(self, fake_session_factory):
        session = fake_session_factory(body={"completion": "unused"})
        backend = RemoteRecognitionBackend(session=session)

        with pytest.raises(RecognitionError):
            asyncio.run(backend.transcribe(None))
        assert session.calls == []


@pytest.mark.unit
class TestOfflineRecognitionBackend:

    def test_four_canned_documents(self):
        assert len(CANNED_DOCUMENTS) == 4
        headings = [doc.splitlines()[0] for doc in CANNED_DOCUMENTS]
        assert headings == ["INVOICE", "MEETING MINUTES", "RECEIPT", "BUSINESS CARD"]

    def test_returns_canned_document(self):
        backend = OfflineRecognitionBackend(delay_seconds=0, seed=7)

        assert asyncio.run(backend.recognize_offline()) in CANNED_DOCUMENTS

    def test_seeded_choice_is_reproducible(self):
        async def pick(seed):
            backend = OfflineRecognitionBackend(delay_seconds=0, seed=seed)
            return [await backend.recognize_offline() for _ in range(10)]

        assert asyncio.run(pick(1234)) == asyncio.run(pick(1234))

    def test_choice_matches_seeded_random(self):
        expected = random.Random(99).choice(CANNED_DOCUMENTS)
        backend = OfflineRecognitionBackend(delay_seconds=0, seed=99)

        assert asyncio.run(backend.recognize_offline()) == expected

    def test_default_delay(self):
        backend = OfflineRecognitionBackend(seed=1)

        with patch("handscribe.recognition.offline_backend.asyncio.sleep",
                   new_callable=AsyncMock) as mock_sleep:
            asyncio.run(backend.recognize_offline())

        mock_sleep.assert_awaited_once_with(1.5)

    def test_simulated_latency(self):
        backend = OfflineRecognitionBackend(delay_seconds=0.2, seed=3)

        start = time.monotonic()
        asyncio.run(backend.recognize_offline())

        assert time.monotonic() - start >= 0.19

    def test_transcribe_ignores_image(self):
        backend = OfflineRecognitionBackend(delay_seconds=0, seed=5)
        image = ImageSource(uri="file:///note.png", data=b"png")

        assert asyncio.run(backend.transcribe(image)) in CANNED_DOCUMENTS
        assert asyncio.run(backend.transcribe(None)) in CANNED_DOCUMENTS
