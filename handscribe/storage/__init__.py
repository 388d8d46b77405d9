"""
Handscribe Storage Module

Provides persistent storage for transcription history.
"""

from .history_store import HistoryStore, HistoryQuery, HISTORY_KEY
from .slot_storage import AbstractSlotStorage, InMemorySlotStorage, JsonFileSlotStorage

__all__ = [
    "HistoryStore",
    "HistoryQuery",
    "HISTORY_KEY",
    "AbstractSlotStorage",
    "InMemorySlotStorage",
    "JsonFileSlotStorage",
]
