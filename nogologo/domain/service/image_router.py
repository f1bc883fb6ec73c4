"""Image Router Domain Service - Domain Layer"""

from typing import Dict

from ..entity.image import ProviderId
from ..repository.image_provider import ImageProvider


class ImageRouterError(Exception):
    """Image routing error"""
    pass


class ImageRouter:
    """Maps provider ids to their image provider"""

    def __init__(self, providers: Dict[ProviderId, ImageProvider]):
        """Initialize the image router

        Args:
            providers: Provider mapping {provider_id: provider_instance}
        """
        self._providers = dict(providers)

    def get_provider(self, provider_id: ProviderId) -> ImageProvider:
        """Return the provider for an id

        Raises:
            ImageRouterError: no provider is registered for the id
        """
        provider = self._providers.get(ProviderId(provider_id))
        if provider is None:
            raise ImageRouterError(f"Provider '{provider_id}' not found")
        return provider
