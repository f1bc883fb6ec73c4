import base64
import io
import json
from typing import Callable, List

import httpx
import pytest
from PIL import Image

from nogologo.domain.service.request_log import RequestLog


def _make_image(width: int = 64, height: int = 48, fmt: str = "PNG") -> bytes:
    image = Image.new("RGB", (width, height), (200, 30, 30))
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    return _make_image


@pytest.fixture
def b64():
    return lambda data: base64.b64encode(data).decode("ascii")


@pytest.fixture
def request_log() -> RequestLog:
    return RequestLog()


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def json_bodies(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests if r.content]


@pytest.fixture
def recording_transport():
    return RecordingTransport
