"""Photo Sink Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence


class PhotoSink(ABC):
    """Local photo library the generated images are saved to."""

    @abstractmethod
    def request_write_permission(self) -> bool:
        """Ask for write access. Returns whether it was granted."""
        pass

    @abstractmethod
    def save_batch(self, images: Sequence[bytes], album_name: str) -> Path:
        """Save every image of one generation call in a single album transaction

        Args:
            images: Encoded image bytes
            album_name: Name of the album to create

        Returns:
            Location of the created album

        Raises:
            PersistenceError: nothing was saved
        """
        pass
