"""In-Memory Stores - Infrastructure Layer"""

from typing import Dict, Mapping, Optional

from ...domain.entity.image import ProviderId
from ...domain.entity.provider_config import ProviderConfig, default_config
from ...domain.repository.config_store import ConfigStore
from ...domain.repository.credential_store import CredentialStore


class InMemoryCredentialStore(CredentialStore):
    """In-memory credential store"""

    def __init__(self, secrets: Optional[Mapping[ProviderId, str]] = None):
        self._secrets: Dict[ProviderId, str] = {}
        for provider_id, secret in (secrets or {}).items():
            self.set(provider_id, secret)

    def get(self, provider_id: ProviderId) -> Optional[str]:
        return self._secrets.get(ProviderId(provider_id))

    def set(self, provider_id: ProviderId, secret: str) -> None:
        secret = (secret or "").strip()
        if not secret:
            raise ValueError("API key cannot be empty")
        self._secrets[ProviderId(provider_id)] = secret

    def delete_all(self) -> None:
        self._secrets.clear()


class InMemoryConfigStore(ConfigStore):
    """In-memory config store"""

    def __init__(self, *configs: ProviderConfig):
        self._configs: Dict[ProviderId, ProviderConfig] = {}
        for config in configs:
            self.save(config)

    def load(self, provider_id: ProviderId) -> ProviderConfig:
        provider_id = ProviderId(provider_id)
        return self._configs.get(provider_id) or default_config(provider_id)

    def save(self, config: ProviderConfig) -> None:
        self._configs[config.provider_id] = config

    def reset(self, provider_id: ProviderId) -> ProviderConfig:
        self._configs.pop(ProviderId(provider_id), None)
        return self.load(provider_id)
