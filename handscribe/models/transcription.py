"""Transcription-related data models."""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import AwareDatetime, BaseModel, Field

DEFAULT_TIMESTAMP_FORMAT = "%H:%M"


def new_record_id() -> str:
    """Return a fresh collision-free record identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class TranscriptionRecord:
    """One successful recognition, immutable once created."""
    id: str
    text: str
    created_at: datetime          # Timezone-aware; ordering source of truth
    display_timestamp: str        # Formatted once at creation, never recomputed
    image_ref: Optional[str] = None  # None for the offline/demo path

    @property
    def has_image(self) -> bool:
        return self.image_ref is not None

    @classmethod
    def create(cls,
               text: str,
               image_ref: Optional[str] = None,
               created_at: Optional[datetime] = None,
               timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT) -> "TranscriptionRecord":
        """Build a new record stamped with the current local time.

        Args:
            text: Recognized text, must not be blank
            image_ref: URI of the source image, if any
            created_at: Creation instant (defaults to now)
            timestamp_format: strftime format of the display timestamp

        Returns:
            New TranscriptionRecord with a fresh id
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        if created_at is None:
            created_at = datetime.now().astimezone()

        return cls(
            id=new_record_id(),
            text=text,
            created_at=created_at,
            display_timestamp=created_at.strftime(timestamp_format),
            image_ref=image_ref,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted history layout."""
        return PersistedRecord(
            id=self.id,
            text=self.text,
            timestamp=self.display_timestamp,
            date=self.created_at,
            imageUri=self.image_ref,
        ).model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscriptionRecord":
        """Build a record from a persisted entry.

        Raises:
            pydantic.ValidationError: If the entry does not match the layout
        """
        entry = PersistedRecord.model_validate(data)
        return cls(
            id=entry.id,
            text=entry.text,
            created_at=entry.date,
            display_timestamp=entry.timestamp,
            image_ref=entry.imageUri,
        )


class PersistedRecord(BaseModel):
    """Schema of a single entry in the persisted history array."""
    id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    timestamp: str
    date: AwareDatetime
    imageUri: Optional[str] = None
