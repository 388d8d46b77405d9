"""Services layer for Handscribe application logic."""

from .processing_controller import ProcessingController
from .pipeline import TranscriptionPipeline, create_backend

__all__ = [
    "ProcessingController",
    "TranscriptionPipeline",
    "create_backend"
]
