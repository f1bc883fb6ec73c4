"""Config Store Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod

from ..entity.image import ProviderId
from ..entity.provider_config import ProviderConfig


class ConfigStore(ABC):
    """Loads and saves per-provider settings."""

    @abstractmethod
    def load(self, provider_id: ProviderId) -> ProviderConfig:
        """Return the current config for a provider (defaults when unset)."""
        pass

    @abstractmethod
    def save(self, config: ProviderConfig) -> None:
        """Persist a provider config

        Raises:
            PersistenceError: the config could not be written
        """
        pass

    @abstractmethod
    def reset(self, provider_id: ProviderId) -> ProviderConfig:
        """Restore and persist the provider's defaults."""
        pass
