"""Image Provider Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod

from ..entity.image import GenerationResult, ProviderId
from ..entity.provider_config import ProviderConfig


class ImageProvider(ABC):
    """Image generation provider interface

    Defined in the domain layer, implemented in the infrastructure layer.
    """

    provider_id: ProviderId

    @abstractmethod
    async def generate_images(
        self,
        prompt: str,
        count: int,
        credential: str,
        config: ProviderConfig,
    ) -> GenerationResult:
        """Generate images for a prompt

        Args:
            prompt: User prompt
            count: Number of images requested
            credential: Provider API key
            config: Immutable config snapshot for this call

        Returns:
            Either every decoded image or the error that stopped the call.
            Provider failures are never raised.
        """
        pass
