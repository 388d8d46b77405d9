"""Recognition module for Handscribe."""

from .base import AbstractRecognitionBackend
from .remote_backend import RemoteRecognitionBackend
from .offline_backend import OfflineRecognitionBackend, CANNED_DOCUMENTS

__all__ = [
    "AbstractRecognitionBackend",
    "RemoteRecognitionBackend",
    "OfflineRecognitionBackend",
    "CANNED_DOCUMENTS",
]
