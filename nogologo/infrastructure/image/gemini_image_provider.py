"""Gemini Image Provider - Infrastructure Layer"""

from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import httpx

from ...domain.entity.image import ProviderId
from ...domain.entity.log_entry import LogCategory
from ...domain.entity.provider_config import GeminiConfig
from ...domain.exceptions import ParseError, UnsupportedOperation
from ...domain.service.request_log import RequestLog
from .base import DEFAULT_TIMEOUT, HttpImageProvider

# None of the selectable Gemini models return images; they are text-only.
IMAGE_CAPABLE_MODELS: FrozenSet[str] = frozenset()

HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


def build_payload(prompt: str, config: GeminiConfig) -> Dict[str, Any]:
    """Single-image generateContent payload"""
    return {
        "contents": [
            {
                "parts": [
                    {"text": f"Create an image of {prompt}"},
                ]
            }
        ],
        "safetySettings": [
            {"category": category, "threshold": config.safety.value}
            for category in HARM_CATEGORIES
        ],
    }


def endpoint_url(config: GeminiConfig) -> str:
    base = config.base_endpoint.rstrip("/")
    return f"{base}/models/{config.model.value}:generateContent"


def extract_inline_image(body: Any) -> str:
    """Return the base64 image at ``candidates[0].content.parts[0].inlineData``

    Raises:
        ParseError: the path is missing or the part is not an image
    """
    try:
        inline = body["candidates"][0]["content"]["parts"][0]["inlineData"]
        mime_type = inline["mimeType"]
        data = inline["data"]
    except (KeyError, IndexError, TypeError) as e:
        raise ParseError("Response has no inline image data") from e

    if not isinstance(mime_type, str) or not mime_type.startswith("image/"):
        raise ParseError(f"Inline data is not an image (mimeType={mime_type!r})")
    if not isinstance(data, str):
        raise ParseError("Inline image data is not a string")

    return data


class GeminiImageProvider(HttpImageProvider):
    """Gemini image generation provider implementation

    The generateContent endpoint returns at most one image, so one request is
    issued per desired image.
    """

    provider_id = ProviderId.GEMINI

    def __init__(
        self,
        request_log: RequestLog,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        best_effort_decode: bool = True,
        image_models: Iterable[str] = IMAGE_CAPABLE_MODELS,
    ):
        super().__init__(request_log, timeout, transport, best_effort_decode)
        self._image_models = frozenset(image_models)

    def supports_image_generation(self, config: GeminiConfig) -> bool:
        return config.model.value in self._image_models

    async def _generate(
        self,
        prompt: str,
        count: int,
        credential: str,
        config: GeminiConfig,
    ) -> List[bytes]:
        if not self.supports_image_generation(config):
            raise UnsupportedOperation(
                f"Model '{config.model.value}' is text-only and cannot generate images"
            )

        headers = {"x-goog-api-key": credential}
        url = endpoint_url(config)
        payload = build_payload(prompt, config)

        images = []
        async with self._client() as client:
            for index in range(count):
                body = await self._post_json(client, url, headers, payload)
                decoded = self._decode_base64(index, extract_inline_image(body))
                if decoded is not None:
                    images.append(decoded)
        return images
