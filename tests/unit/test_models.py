"""Unit tests for data models."""

import pytest
from datetime import datetime, timezone, timedelta
from pathlib import Path

from pydantic import ValidationError

from handscribe.exceptions import ImageReadError, RecognitionError
from handscribe.models import TranscriptionRecord, RunState, RunStatus, ImageSource


@pytest.mark.unit
class TestTranscriptionRecord:

    def test_create_stamps_time(self):
        created = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone(timedelta(hours=2)))

        record = TranscriptionRecord.create("Hello", created_at=created)

        assert record.created_at == created
        assert record.display_timestamp == "15:04"
        assert record.image_ref is None
        assert len(record.id) == 32

    def test_create_defaults_to_aware_now(self):
        record = TranscriptionRecord.create("Hello")
        assert record.created_at.tzinfo is not None

    def test_custom_timestamp_format(self):
        created = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)

        record = TranscriptionRecord.create("Hello", created_at=created,
                                            timestamp_format="%Y-%m-%d %H:%M")

        assert record.display_timestamp == "2024-01-02 15:04"

    def test_create_rejects_empty_text(self):
        with pytest.raises(ValueError):
            TranscriptionRecord.create("")

    def test_ids_differ(self):
        created = datetime(2024, 1, 2, tzinfo=timezone.utc)
        first = TranscriptionRecord.create("a", created_at=created)
        second = TranscriptionRecord.create("a", created_at=created)

        assert first.id != second.id

    def test_record_is_immutable(self):
        record = TranscriptionRecord.create("Hello")
        with pytest.raises(AttributeError):
            record.text = "changed"

    def test_display_timestamp_not_recomputed(self):
        created = datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc)
        data = TranscriptionRecord.create("Hello", created_at=created).to_dict()
        data["timestamp"] = "8:00 AM"

        assert TranscriptionRecord.from_dict(data).display_timestamp == "8:00 AM"

    def test_dict_round_trip(self):
        record = TranscriptionRecord.create("Hello", image_ref="file:///x.png",
                                            created_at=datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc))

        assert TranscriptionRecord.from_dict(record.to_dict()) == record

    def test_from_dict_rejects_missing_fields(self):
        with pytest.raises(ValidationError):
            TranscriptionRecord.from_dict({"id": "1", "text": "x"})


@pytest.mark.unit
class TestRunState:

    def test_initial_state_is_idle(self):
        state = RunState.idle()
        assert state.status is RunStatus.IDLE
        assert not state.is_terminal

    def test_success_carries_record(self):
        record = TranscriptionRecord.create("Hello")
        running = RunState.processing()

        done = running.succeeded(record)

        assert done.status is RunStatus.SUCCEEDED
        assert done.record is record
        assert done.error is None
        assert done.started_at == running.started_at
        assert done.finished_at is not None
        assert done.is_terminal

    def test_failure_carries_reason(self):
        done = RunState.processing().failed("boom")

        assert done.status is RunStatus.FAILED
        assert done.error == "boom"
        assert done.record is None


@pytest.mark.unit
class TestImageSource:

    def test_from_path(self, sample_image_file):
        image = ImageSource.from_path(sample_image_file)

        assert image.data.startswith(b"\x89PNG")
        assert image.uri == Path(sample_image_file).absolute().as_uri()

    def test_from_file_uri(self, sample_image_file):
        uri = Path(sample_image_file).absolute().as_uri()

        image = ImageSource.from_path(uri)

        assert image.uri == uri

    def test_missing_file(self, temp_data_dir):
        with pytest.raises(ImageReadError):
            ImageSource.from_path(str(Path(temp_data_dir) / "missing.png"))

    def test_empty_file(self, temp_data_dir):
        path = Path(temp_data_dir) / "empty.png"
        path.write_bytes(b"")

        with pytest.raises(ImageReadError):
            ImageSource.from_path(str(path))

    def test_unsupported_scheme(self):
        with pytest.raises(ImageReadError):
            ImageSource.from_path("https://example.com/note.png")

    def test_image_read_error_is_recognition_error(self):
        assert issubclass(ImageReadError, RecognitionError)
