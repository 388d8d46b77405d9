"""Durable key-value slots backing the history store."""

import os
import logging
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from ..exceptions import PersistenceReadError, PersistenceWriteError

logger = logging.getLogger(__name__)


class AbstractSlotStorage(ABC):
    """String values stored under fixed logical keys."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the slot is empty.

        Raises:
            PersistenceReadError: If the slot exists but cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Durably store a value.

        Raises:
            PersistenceWriteError: If the value could not be saved
        """
        pass


class InMemorySlotStorage(AbstractSlotStorage):
    """Dictionary-backed slots, lost when the process exits."""

    def __init__(self):
        self._slots: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value


class JsonFileSlotStorage(AbstractSlotStorage):
    """One JSON file per slot inside a data directory."""

    def __init__(self, data_dir: str = "./data"):
        """Initialize file slot storage.

        Args:
            data_dir: Directory holding one ``<key>.json`` file per slot
        """
        self.data_dir = Path(data_dir)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceWriteError(f"Failed to create data directory {self.data_dir}: {e}") from e

        logger.info(f"JsonFileSlotStorage initialized with data_dir: {self.data_dir}")

    def get_slot_path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.get_slot_path(key)
        if not path.exists():
            logger.debug(f"Slot file not found: {path}")
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceReadError(f"Failed to read slot {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self.get_slot_path(key)
        tmp_path = None

        # Write to a sibling temp file then rename, so readers never see a partial slot
        try:
            with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=self.data_dir,
                                             prefix=f".{key}.", suffix=".tmp",
                                             delete=False) as f:
                tmp_path = f.name
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except (OSError, UnicodeEncodeError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceWriteError(f"Failed to save slot {key}: {e}") from e

        logger.debug(f"Slot saved: {path} ({len(value)} chars)")
