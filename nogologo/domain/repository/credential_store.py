"""Credential Store Repository Interface - Domain Layer"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..entity.image import ProviderId


class CredentialStore(ABC):
    """Stores at most one API key per provider, persisted across restarts."""

    @abstractmethod
    def get(self, provider_id: ProviderId) -> Optional[str]:
        """Return the stored key, or None when absent."""
        pass

    @abstractmethod
    def set(self, provider_id: ProviderId, secret: str) -> None:
        """Store or replace a provider key

        Raises:
            PersistenceError: the key could not be written
        """
        pass

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every stored key

        Raises:
            PersistenceError: the store could not be written
        """
        pass

    def replace_all(self, secrets: Dict[ProviderId, str]) -> None:
        """Delete all keys, then store each non-empty one."""
        self.delete_all()
        for provider_id, secret in secrets.items():
            if secret and secret.strip():
                self.set(provider_id, secret.strip())

    def configured_providers(self) -> Dict[ProviderId, bool]:
        """Report which providers have a key."""
        return {p: self.get(p) is not None for p in ProviderId}
