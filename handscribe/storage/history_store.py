"""History store: persisted, newest-first collection of transcription records."""

import json
import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Iterator, Optional, Tuple

from pydantic import ValidationError

from .slot_storage import AbstractSlotStorage
from ..exceptions import PersistenceReadError, PersistenceWriteError
from ..models.transcription import TranscriptionRecord, DEFAULT_TIMESTAMP_FORMAT
from ..publisher import HistoryPublisher

logger = logging.getLogger(__name__)

HISTORY_KEY = "ocr-history"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class HistoryQuery:
    """Lazy, restartable view of the records whose text contains a substring.

    The view is bound to the collection as it was when the query was made;
    filtering happens on each iteration.
    """

    def __init__(self, records: Tuple[TranscriptionRecord, ...], substring: str = ""):
        self._records = records
        self.substring = substring
        self._needle = substring.casefold()

    def __iter__(self) -> Iterator[TranscriptionRecord]:
        if not self._needle:
            yield from self._records
            return
        for record in self._records:
            if self._needle in record.text.casefold():
                yield record

    def __repr__(self) -> str:
        return f"HistoryQuery(substring={self.substring!r}, scanned={len(self._records)})"


class HistoryStore:
    """Ordered collection of TranscriptionRecord persisted in a single slot.

    Records are kept newest first. The whole collection is written to the slot
    on every mutation and read back once, when the store is created.
    """

    def __init__(self,
                 storage: AbstractSlotStorage,
                 key: str = HISTORY_KEY,
                 timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
                 clock: Optional[Callable[[], datetime]] = None,
                 publisher: Optional[HistoryPublisher] = None):
        """Initialize history store and hydrate it from storage.

        Args:
            storage: Slot storage holding the persisted collection
            key: Logical key of the history slot
            timestamp_format: strftime format of record display timestamps
            clock: Returns the current timezone-aware instant
            publisher: Publisher notified after each mutation
        """
        self.storage = storage
        self.key = key
        self.timestamp_format = timestamp_format
        self._clock = clock or _local_now
        self._publisher = publisher or HistoryPublisher()
        self._lock = threading.RLock()

        try:
            self._records = self._load()
        except PersistenceReadError as e:
            logger.warning(f"Discarding unreadable history in slot '{key}': {e}")
            self._records = ()

        logger.info(f"HistoryStore initialized with {len(self._records)} records (slot '{key}')")

    def _load(self) -> Tuple[TranscriptionRecord, ...]:
        """Read and validate the persisted collection."""
        blob = self.storage.get(self.key)
        if blob is None:
            return ()

        try:
            entries = json.loads(blob)
        except ValueError as e:
            raise PersistenceReadError(f"Invalid JSON: {e}") from e

        if not isinstance(entries, list):
            raise PersistenceReadError(f"Expected a list, got {type(entries).__name__}")

        try:
            records = tuple(TranscriptionRecord.from_dict(entry) for entry in entries)
        except ValidationError as e:
            raise PersistenceReadError(f"Invalid history entry: {e}") from e

        if len({record.id for record in records}) != len(records):
            raise PersistenceReadError("Duplicate record ids")

        return records

    def _save(self, records: Tuple[TranscriptionRecord, ...]) -> None:
        try:
            blob = json.dumps([record.to_dict() for record in records], ensure_ascii=False)
        except (ValueError, TypeError) as e:
            raise PersistenceWriteError(f"Failed to serialize history: {e}") from e
        self.storage.set(self.key, blob)

    def _next_created_at(self) -> datetime:
        """Current instant, kept strictly after the newest record."""
        now = self._clock()
        if self._records and now <= self._records[0].created_at:
            now = self._records[0].created_at + timedelta(microseconds=1)
        return now

    def insert(self, text: str, image_ref: Optional[str] = None) -> TranscriptionRecord:
        """Create a record and prepend it to the history.

        Args:
            text: Recognized text
            image_ref: URI of the source image, if any

        Returns:
            The created record

        Raises:
            ValueError: If text is blank
            PersistenceWriteError: If the history could not be saved; the
                in-memory collection is left unchanged
        """
        with self._lock:
            record = TranscriptionRecord.create(
                text,
                image_ref=image_ref,
                created_at=self._next_created_at(),
                timestamp_format=self.timestamp_format,
            )
            records = (record,) + self._records
            self._save(records)
            self._records = records
            logger.info(f"Inserted record {record.id} ({len(text)} chars, image={record.has_image})")
            # Listeners see sizes in commit order
            self._publisher.publish_change("insert", len(records))

        return record

    def clear(self) -> int:
        """Remove every record.

        Returns:
            Number of records removed

        Raises:
            PersistenceWriteError: If the empty history could not be saved
        """
        with self._lock:
            count = len(self._records)
            self._save(())
            self._records = ()
            logger.info(f"Cleared {count} records from history")
            self._publisher.publish_change("clear", 0)

        return count

    def query(self, substring: str = "") -> HistoryQuery:
        """Case-insensitive substring search over record text, newest first."""
        return HistoryQuery(self._records, substring)

    def get(self, record_id: str) -> Optional[TranscriptionRecord]:
        """Get a specific record by id."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    @property
    def records(self) -> Tuple[TranscriptionRecord, ...]:
        return self._records

    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)
