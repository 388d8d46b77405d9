"""Image source model handed to recognition backends."""

import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

from ..exceptions import ImageReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageSource:
    """Image bytes together with the URI they were read from."""
    uri: str
    data: bytes

    @classmethod
    def from_path(cls, path_or_uri: str) -> "ImageSource":
        """Read an image from a filesystem path or a ``file://`` URI.

        Args:
            path_or_uri: Local path or file URI of the image

        Returns:
            ImageSource holding the file bytes and its canonical file URI

        Raises:
            ImageReadError: If the image cannot be read or is empty
        """
        parsed = urlparse(path_or_uri)
        if parsed.scheme == "file":
            path = Path(unquote(parsed.path))
        elif not parsed.scheme or len(parsed.scheme) == 1:
            # Plain path (single-letter scheme is a Windows drive)
            path = Path(path_or_uri)
        else:
            raise ImageReadError(f"Unsupported image URI scheme: {parsed.scheme}")

        try:
            data = path.read_bytes()
        except OSError as e:
            raise ImageReadError(f"Failed to read image {path}: {e}") from e

        if not data:
            raise ImageReadError(f"Image file is empty: {path}")

        logger.debug(f"Read image {path} ({len(data)} bytes)")
        return cls(uri=path.absolute().as_uri(), data=data)
