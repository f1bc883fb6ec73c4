from unittest.mock import MagicMock

import pytest

from nogologo.domain.entity.image import ProviderId
from nogologo.domain.repository.image_provider import ImageProvider
from nogologo.domain.service.image_router import ImageRouter, ImageRouterError


def make_provider(provider_id):
    provider = MagicMock(spec=ImageProvider)
    provider.provider_id = provider_id
    return provider


def test_get_provider():
    xai = make_provider(ProviderId.XAI)
    router = ImageRouter({ProviderId.XAI: xai})

    assert router.get_provider(ProviderId.XAI) is xai
    assert router.get_provider("xai") is xai


def test_get_provider_not_found():
    router = ImageRouter({})

    with pytest.raises(ImageRouterError, match="not found"):
        router.get_provider(ProviderId.GEMINI)
