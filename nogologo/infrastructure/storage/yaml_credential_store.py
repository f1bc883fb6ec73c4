"""YAML Credential Store - Infrastructure Layer"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from ...domain.entity.image import ProviderId
from ...domain.repository.credential_store import CredentialStore
from .yaml_file import read_yaml, write_yaml

logger = logging.getLogger(__name__)

# Owner read/write only
FILE_MODE = 0o600


class YamlCredentialStore(CredentialStore):
    """API keys kept in a private YAML file

    ``<PROVIDER>_API_KEY`` environment variables take precedence over the file
    (e.g. ``OPENAI_API_KEY``). Writes never touch the environment.
    """

    def __init__(self, path: Path, environ: Optional[Mapping[str, str]] = None):
        self._path = Path(path).expanduser()
        self._environ = os.environ if environ is None else environ

    @staticmethod
    def env_var(provider_id: ProviderId) -> str:
        return f"{ProviderId(provider_id).value.upper()}_API_KEY"

    def get(self, provider_id: ProviderId) -> Optional[str]:
        env_value = self._environ.get(self.env_var(provider_id))
        if env_value:
            return env_value

        value = self._read().get(ProviderId(provider_id).value)
        return str(value) if value else None

    def set(self, provider_id: ProviderId, secret: str) -> None:
        secret = (secret or "").strip()
        if not secret:
            raise ValueError("API key cannot be empty")

        data = self._read()
        data[ProviderId(provider_id).value] = secret
        write_yaml(self._path, data, mode=FILE_MODE)
        logger.info(f"Stored API key for {ProviderId(provider_id).value}")

    def delete_all(self) -> None:
        write_yaml(self._path, {}, mode=FILE_MODE)
        logger.info("Deleted all stored API keys")

    def replace_all(self, secrets: Mapping[ProviderId, str]) -> None:
        """Swap every key in a single write"""
        data: Dict[str, str] = {}
        for provider_id, secret in secrets.items():
            if secret and secret.strip():
                data[ProviderId(provider_id).value] = secret.strip()
        write_yaml(self._path, data, mode=FILE_MODE)
        logger.info(f"Stored API keys for {len(data)} provider(s)")

    def _read(self) -> Dict[str, str]:
        return read_yaml(self._path)
