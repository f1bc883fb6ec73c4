"""OpenAI Image Provider - Infrastructure Layer"""

from typing import Any, Dict, List

from ...domain.entity.image import ProviderId
from ...domain.entity.provider_config import ImageFormat, OpenAIConfig, ResponseFormat
from .base import HttpImageProvider

# output_compression is only accepted for lossy formats
_COMPRESSIBLE_FORMATS = {ImageFormat.JPEG, ImageFormat.WEBP}


def build_payload(prompt: str, count: int, config: OpenAIConfig) -> Dict[str, Any]:
    """Build the images/generations payload for the configured model

    Fields the model does not accept are left out.
    """
    capabilities = config.capabilities

    payload: Dict[str, Any] = {
        "prompt": prompt,
        "model": config.model.value,
        "n": count,
        "size": capabilities.resolve_size(config.size).value,
    }

    if capabilities.supports_quality:
        payload["quality"] = config.quality.value

    if capabilities.supports_background:
        payload["background"] = config.background.value

    if capabilities.supports_output_format:
        payload["output_format"] = config.output_format.value
        if config.output_format in _COMPRESSIBLE_FORMATS:
            payload["output_compression"] = config.output_compression

    if capabilities.supports_response_format:
        payload["response_format"] = ResponseFormat.B64_JSON.value

    return payload


class OpenAIImageProvider(HttpImageProvider):
    """OpenAI image generation provider implementation"""

    provider_id = ProviderId.OPENAI

    async def _generate(
        self,
        prompt: str,
        count: int,
        credential: str,
        config: OpenAIConfig,
    ) -> List[bytes]:
        headers = {"Authorization": f"Bearer {credential}"}
        per_call = config.capabilities.max_images_per_call

        images: List[bytes] = []
        async with self._client() as client:
            remaining = count
            # dall-e-3 returns one image per call, so loop until count is covered
            while remaining > 0:
                n = min(remaining, per_call)
                body = await self._post_json(
                    client,
                    config.image_endpoint,
                    headers,
                    build_payload(prompt, n, config),
                )
                images.extend(await self._read_data_items(client, body))
                remaining -= n

        return images
