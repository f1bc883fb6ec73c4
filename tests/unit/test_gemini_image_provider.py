import httpx
import pytest

from nogologo.domain.entity.log_entry import LogCategory
from nogologo.domain.entity.provider_config import GeminiConfig, GeminiModel, SafetySetting
from nogologo.domain.exceptions import HttpError, ParseError, UnsupportedOperation
from nogologo.infrastructure.image.gemini_image_provider import (
    GeminiImageProvider,
    build_payload,
    endpoint_url,
    extract_inline_image,
)


def inline_body(data: str, mime_type: str = "image/png") -> dict:
    return {
        "candidates": [
            {"content": {"parts": [{"inlineData": {"mimeType": mime_type, "data": data}}]}}
        ]
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("model", list(GeminiModel))
async def test_text_only_models_never_touch_the_network(request_log, model):
    def handler(request):
        raise AssertionError("Gemini must not issue a request")

    provider = GeminiImageProvider(request_log, transport=httpx.MockTransport(handler))

    result = await provider.generate_images("a cat", 2, "gm-key", GeminiConfig(model=model))

    assert isinstance(result.error, UnsupportedOperation)
    assert result.images == ()
    categories = {e.category for e in request_log.all()}
    assert LogCategory.REQUEST not in categories
    assert LogCategory.RESPONSE not in categories


def test_payload_shape():
    payload = build_payload("a cat", GeminiConfig(safety=SafetySetting.BLOCK_HIGH_AND_ABOVE))

    assert payload["contents"] == [{"parts": [{"text": "Create an image of a cat"}]}]
    assert {s["threshold"] for s in payload["safetySettings"]} == {"BLOCK_HIGH_AND_ABOVE"}


def test_endpoint_url():
    config = GeminiConfig(base_endpoint="https://example.test/v1beta/")

    assert endpoint_url(config) == "https://example.test/v1beta/models/gemini-1.5-flash:generateContent"


def test_extract_inline_image():
    assert extract_inline_image(inline_body("abcd")) == "abcd"


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"candidates": []},
        {"candidates": [{"content": {"parts": [{"text": "I can only write text"}]}}]},
        inline_body("abcd", mime_type="text/plain"),
        None,
    ],
)
def test_extract_inline_image_rejects_malformed(body):
    with pytest.raises(ParseError):
        extract_inline_image(body)


@pytest.mark.asyncio
async def test_image_capable_model_issues_one_request_per_image(request_log, recording_transport, b64):
    transport = recording_transport(lambda request: httpx.Response(200, json=inline_body(b64(b"png"))))
    provider = GeminiImageProvider(
        request_log,
        transport=transport,
        image_models={GeminiModel.GEMINI_1_5_FLASH.value},
    )

    result = await provider.generate_images("a cat", 3, "gm-key", GeminiConfig())

    assert result.images == (b"png", b"png", b"png")
    assert len(transport.requests) == 3
    assert transport.requests[0].headers["x-goog-api-key"] == "gm-key"
    assert "Authorization" not in transport.requests[0].headers


@pytest.mark.asyncio
async def test_image_capable_model_http_error(request_log, recording_transport):
    transport = recording_transport(lambda request: httpx.Response(403))
    provider = GeminiImageProvider(
        request_log,
        transport=transport,
        image_models={GeminiModel.GEMINI_1_5_PRO.value},
    )

    result = await provider.generate_images("a cat", 2, "gm-key", GeminiConfig(model=GeminiModel.GEMINI_1_5_PRO))

    assert isinstance(result.error, HttpError)
    assert len(transport.requests) == 1
