"""Directory Photo Sink - Infrastructure Layer"""

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence
from uuid import uuid4

from ...domain.exceptions import PersistenceError
from ...domain.repository.photo_sink import PhotoSink
from ..image.processing import file_extension

logger = logging.getLogger(__name__)


class DirectoryPhotoSink(PhotoSink):
    """Photo library laid out as ``<root>/<album>/<timestamp>-<id>/image-NN.ext``

    Each batch is written to a hidden temporary directory and renamed into
    place, so an album appears with all of its images or not at all.
    """

    def __init__(self, root: Path, clock: Callable[[], datetime] = datetime.now):
        self._root = Path(root).expanduser()
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._root

    def request_write_permission(self) -> bool:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create photo library at {self._root}: {e}")
            return False
        return os.access(self._root, os.W_OK | os.X_OK)

    def save_batch(self, images: Sequence[bytes], album_name: str) -> Path:
        if not images:
            raise PersistenceError("No images to save")

        album_dir = self._root / _safe_name(album_name)
        batch_name = f"{self._clock():%Y%m%d-%H%M%S}-{uuid4().hex[:8]}"
        target = album_dir / batch_name

        try:
            album_dir.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(dir=album_dir, prefix=f".{batch_name}."))
        except OSError as e:
            raise PersistenceError(f"Cannot create album '{album_name}': {e}") from e

        try:
            for index, image_data in enumerate(images, start=1):
                filename = f"image-{index:02d}{file_extension(image_data)}"
                (staging / filename).write_bytes(image_data)
            os.replace(staging, target)
        except OSError as e:
            shutil.rmtree(staging, ignore_errors=True)
            raise PersistenceError(f"Failed to save images to album '{album_name}': {e}") from e

        logger.info(f"Saved {len(images)} image(s) to {target}")
        return target


def _safe_name(name: str) -> str:
    cleaned = "".join(c if c.isalnum() or c in " -_." else "_" for c in name).strip(" .")
    return cleaned or "Untitled"
