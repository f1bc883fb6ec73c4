"""xAI Image Provider - Infrastructure Layer"""

from typing import Any, Dict, List

from ...domain.entity.image import ProviderId
from ...domain.entity.provider_config import XAIConfig
from .base import HttpImageProvider
from .processing import crop_bottom

# Band removed from the bottom of every xAI image (watermark strip)
CROP_PIXELS = 20


def build_payload(prompt: str, count: int, config: XAIConfig) -> Dict[str, Any]:
    return {
        "prompt": prompt,
        "model": config.model,
        "n": count,
        "response_format": config.response_format.value,
    }


class XAIImageProvider(HttpImageProvider):
    """xAI image generation provider implementation"""

    provider_id = ProviderId.XAI

    async def _generate(
        self,
        prompt: str,
        count: int,
        credential: str,
        config: XAIConfig,
    ) -> List[bytes]:
        headers = {"Authorization": f"Bearer {credential}"}

        async with self._client() as client:
            body = await self._post_json(
                client,
                config.image_endpoint,
                headers,
                build_payload(prompt, count, config),
            )
            raw_images = await self._read_data_items(client, body)

        cropped = []
        for index, image_data in enumerate(raw_images):
            try:
                cropped.append(crop_bottom(image_data, CROP_PIXELS))
            except ValueError as e:
                self._drop(index, str(e))
        return cropped
