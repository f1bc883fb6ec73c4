"""Image post-processing helpers (Pillow)"""

import io
from typing import Optional

from PIL import Image, UnidentifiedImageError

_SAVE_FORMATS = {"PNG", "JPEG", "WEBP"}

_EXTENSIONS = {
    "PNG": ".png",
    "JPEG": ".jpg",
    "WEBP": ".webp",
    "GIF": ".gif",
}


def crop_bottom(image_data: bytes, pixels: int) -> bytes:
    """Remove a band of ``pixels`` rows from the bottom of an image.

    The image keeps its encoding when Pillow can write it back, otherwise it
    is re-encoded as PNG.

    Raises:
        ValueError: the data is not a readable image or is too short to crop
    """
    try:
        with Image.open(io.BytesIO(image_data)) as image:
            image.load()
            source_format = image.format
            width, height = image.size
            if height <= pixels:
                raise ValueError(f"Image height {height}px is not above the {pixels}px crop")
            cropped = image.crop((0, 0, width, height - pixels))
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Unreadable image data: {e}") from e

    target_format = source_format if source_format in _SAVE_FORMATS else "PNG"
    if target_format == "JPEG" and cropped.mode not in ("RGB", "L"):
        cropped = cropped.convert("RGB")

    out = io.BytesIO()
    cropped.save(out, format=target_format)
    return out.getvalue()


def image_format(image_data: bytes) -> Optional[str]:
    """Return Pillow's format name for the data, or None if unreadable."""
    try:
        with Image.open(io.BytesIO(image_data)) as image:
            return image.format
    except (UnidentifiedImageError, OSError):
        return None


def file_extension(image_data: bytes) -> str:
    """File extension matching the encoded image, ``.bin`` when unknown."""
    return _EXTENSIONS.get(image_format(image_data) or "", ".bin")
