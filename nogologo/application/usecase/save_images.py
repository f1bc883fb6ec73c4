"""Save Images Use Case - Application Layer"""

import asyncio
from pathlib import Path
from typing import Optional

from ...domain.entity.image import GenerationResult
from ...domain.entity.log_entry import LogCategory
from ...domain.exceptions import ImageGenerationError, PermissionDenied
from ...domain.repository.photo_sink import PhotoSink
from ...domain.service.request_log import RequestLog

DEFAULT_ALBUM = "NoGoLogo"


class SaveImagesUseCase:
    """Writes one provider's images to the photo library as a single album"""

    def __init__(
        self,
        photo_sink: PhotoSink,
        request_log: RequestLog,
        album_name: str = DEFAULT_ALBUM,
    ):
        self._photo_sink = photo_sink
        self._log = request_log
        self._album_name = album_name

    async def execute(self, result: GenerationResult, album_name: Optional[str] = None) -> Path:
        """Save a successful result

        Raises:
            ValueError: the result carries no images
            PermissionDenied: the photo library refused write access
            PersistenceError: the album could not be written
        """
        if not result.succeeded:
            raise ValueError("Only successful results can be saved")

        name = result.provider_id.display_name
        album = album_name or self._album_name

        try:
            granted = await asyncio.to_thread(self._photo_sink.request_write_permission)
            if not granted:
                raise PermissionDenied("Photo library access denied")

            location = await asyncio.to_thread(self._photo_sink.save_batch, result.images, album)
        except ImageGenerationError as e:
            self._log.append(LogCategory.ERROR, f"{name}: saving images failed: {e}")
            raise

        self._log.append(
            LogCategory.INFO,
            f"{name}: saved {len(result.images)} image(s) to album '{album}' at {location}",
        )
        return location
