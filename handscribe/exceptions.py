"""Exception hierarchy used throughout Handscribe."""


class HandscribeError(Exception):
    """Base exception for all Handscribe errors."""
    pass


class ConfigurationError(HandscribeError):
    """Error in application configuration."""
    pass


class RecognitionError(HandscribeError):
    """Recognition Service call failed (transport, HTTP status or body)."""
    pass


class ImageReadError(RecognitionError):
    """Source image could not be read into bytes."""
    pass


class RecognitionInProgressError(HandscribeError):
    """A recognition was started while another one is still running."""
    pass


class PersistenceError(HandscribeError):
    """Error related to the persisted history slot."""
    pass


class PersistenceReadError(PersistenceError):
    """Persisted history is missing, unreadable or corrupted."""
    pass


class PersistenceWriteError(PersistenceError):
    """History could not be durably saved after a mutation."""
    pass
