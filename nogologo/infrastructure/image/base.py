"""HTTP Image Provider Base - Infrastructure Layer

Shared request/response handling for the JSON image APIs. Subclasses build
the provider payload and pick the images out of the parsed body; this class
owns the transport, the request log entries and the error mapping.
"""

import base64
import binascii
import json
import logging
import time
from abc import abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from ...domain.entity.image import GenerationResult
from ...domain.entity.log_entry import LogCategory
from ...domain.entity.provider_config import ProviderConfig
from ...domain.exceptions import (
    HttpError,
    ImageGenerationError,
    NetworkError,
    ParseError,
    SerializationError,
)
from ...domain.repository.image_provider import ImageProvider
from ...domain.service.request_log import RequestLog

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
_ERROR_BODY_LIMIT = 500


class HttpImageProvider(ImageProvider):
    """Base class for providers reached over HTTP/JSON"""

    def __init__(
        self,
        request_log: RequestLog,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        best_effort_decode: bool = True,
    ):
        """Initialize the provider

        Args:
            request_log: Shared request log
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
            best_effort_decode: Drop undecodable images instead of failing the call
        """
        self._log = request_log
        self._timeout = timeout
        self._transport = transport
        self._best_effort_decode = best_effort_decode

    @property
    def name(self) -> str:
        return self.provider_id.display_name

    async def generate_images(
        self,
        prompt: str,
        count: int,
        credential: str,
        config: ProviderConfig,
    ) -> GenerationResult:
        """Generate images, converting every provider failure into a result"""
        try:
            images = await self._generate(prompt, count, credential, config)
            if not images:
                raise ParseError("Response contained no usable images")
        except ImageGenerationError as e:
            self._log.append(LogCategory.ERROR, f"{self.name}: {e}")
            return GenerationResult.failure(self.provider_id, e)

        self._log.append(
            LogCategory.INFO,
            f"{self.name}: received {len(images)} of {count} requested image(s)",
        )
        return GenerationResult.success(self.provider_id, images)

    @abstractmethod
    async def _generate(
        self,
        prompt: str,
        count: int,
        credential: str,
        config: ProviderConfig,
    ) -> List[bytes]:
        """Run the provider calls and return decoded images

        Raises:
            ImageGenerationError: the call failed as a whole
        """
        pass

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def _post_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: Dict[str, str],
        payload: Dict[str, Any],
    ) -> Any:
        """POST a JSON payload and return the parsed JSON body

        Logs exactly one request entry and, when an HTTP response arrives,
        exactly one response entry.
        """
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Could not encode request body: {e}") from e

        request_headers = {"Content-Type": "application/json", **headers}
        self._log.append(LogCategory.REQUEST, f"{self.name}: POST {url} {body}")

        response = await self._send(client, "POST", url, request_headers, body)

        try:
            return response.json()
        except ValueError as e:
            raise ParseError("Response body is not valid JSON") from e

    async def _download(self, client: httpx.AsyncClient, url: str) -> bytes:
        """GET an image returned by URL"""
        self._log.append(LogCategory.REQUEST, f"{self.name}: GET {url}")
        response = await self._send(client, "GET", url, {}, None)
        return response.content

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[str],
    ) -> httpx.Response:
        started = time.monotonic()
        try:
            response = await client.request(method, url, headers=headers, content=body)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out after {self._timeout:.0f}s") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Network error: {e}") from e

        elapsed_ms = (time.monotonic() - started) * 1000
        self._log.append(
            LogCategory.RESPONSE,
            f"{self.name}: HTTP {response.status_code} in {elapsed_ms:.0f} ms, "
            f"{len(response.content)} bytes",
        )

        if not 200 <= response.status_code < 300:
            raise HttpError(response.status_code, response.text[:_ERROR_BODY_LIMIT])

        return response

    async def _read_data_items(
        self,
        client: httpx.AsyncClient,
        body: Any,
    ) -> List[bytes]:
        """Collect images from an OpenAI-style ``data`` list

        Each item carries either ``b64_json`` or a ``url`` to download.
        """
        items = body.get("data") if isinstance(body, dict) else None
        if not isinstance(items, list) or not items:
            raise ParseError("Response has no 'data' list")

        images = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ParseError(f"Item {index + 1} in 'data' is not an object")

            if item.get("b64_json") is not None:
                decoded = self._decode_base64(index, item["b64_json"])
                if decoded is not None:
                    images.append(decoded)
            elif isinstance(item.get("url"), str) and item["url"]:
                images.append(await self._download(client, item["url"]))
            else:
                raise ParseError(f"Item {index + 1} in 'data' has neither 'b64_json' nor 'url'")

        return images

    def _decode_base64(self, index: int, value: Any) -> Optional[bytes]:
        """Decode one base64 payload, or drop it under the best-effort policy"""
        try:
            decoded = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            self._drop(index, f"undecodable base64 payload ({e})")
            return None

        if not decoded:
            self._drop(index, "empty image payload")
            return None

        return decoded

    def _drop(self, index: int, reason: str) -> None:
        """Skip one image, or fail the call when best-effort decoding is off

        Raises:
            ParseError: best-effort decoding is disabled
        """
        if not self._best_effort_decode:
            raise ParseError(f"Image {index + 1}: {reason}")

        self._log.append(LogCategory.WARNING, f"{self.name}: dropped image {index + 1}: {reason}")
