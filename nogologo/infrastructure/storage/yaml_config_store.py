"""YAML Config Store - Infrastructure Layer"""

import logging
from pathlib import Path

from ...domain.entity.image import ProviderId
from ...domain.entity.provider_config import CONFIG_TYPES, ProviderConfig, default_config
from ...domain.repository.config_store import ConfigStore
from .yaml_file import read_yaml, write_yaml

logger = logging.getLogger(__name__)


class YamlConfigStore(ConfigStore):
    """Provider settings stored in one YAML file, one section per provider

    Example::

        openai:
          model: dall-e-3
          size: 1024x1024
        gemini:
          safety: BLOCK_LOW_AND_ABOVE
    """

    def __init__(self, path: Path):
        self._path = Path(path).expanduser()

    def load(self, provider_id: ProviderId) -> ProviderConfig:
        provider_id = ProviderId(provider_id)
        section = read_yaml(self._path).get(provider_id.value) or {}

        try:
            return CONFIG_TYPES[provider_id].from_dict(section)
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid {provider_id.value} settings in {self._path}, using defaults: {e}")
            return default_config(provider_id)

    def save(self, config: ProviderConfig) -> None:
        data = read_yaml(self._path)
        data[config.provider_id.value] = config.to_dict()
        write_yaml(self._path, data)
        logger.info(f"Saved {config.provider_id.value} settings")

    def reset(self, provider_id: ProviderId) -> ProviderConfig:
        config = default_config(provider_id)
        self.save(config)
        return config
