"""Run-state models for the recognition pipeline."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .transcription import TranscriptionRecord


class RunStatus(Enum):
    """Status of the current recognition run."""
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RunState:
    """Transient, non-persisted state of one recognition run."""
    status: RunStatus = RunStatus.IDLE
    record: Optional[TranscriptionRecord] = None  # Only set when SUCCEEDED
    error: Optional[str] = None                   # Only set when FAILED
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (RunStatus.SUCCEEDED, RunStatus.FAILED)

    @classmethod
    def idle(cls) -> "RunState":
        return cls(status=RunStatus.IDLE)

    @classmethod
    def processing(cls) -> "RunState":
        return cls(status=RunStatus.PROCESSING, started_at=datetime.now())

    def succeeded(self, record: TranscriptionRecord) -> "RunState":
        """Terminal success state for the run started by ``self``."""
        return RunState(status=RunStatus.SUCCEEDED,
                        record=record,
                        started_at=self.started_at,
                        finished_at=datetime.now())

    def failed(self, reason: str) -> "RunState":
        """Terminal failure state for the run started by ``self``."""
        return RunState(status=RunStatus.FAILED,
                        error=reason,
                        started_at=self.started_at,
                        finished_at=datetime.now())
