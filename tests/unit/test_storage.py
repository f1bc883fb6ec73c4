import os
import stat

import pytest
import yaml

from nogologo.domain.entity.image import ProviderId
from nogologo.domain.entity.provider_config import (
    GeminiConfig,
    ImageSize,
    OpenAIConfig,
    OpenAIModel,
    SafetySetting,
    XAIConfig,
)
from nogologo.domain.exceptions import PersistenceError
from nogologo.infrastructure.storage.memory import InMemoryConfigStore, InMemoryCredentialStore
from nogologo.infrastructure.storage.yaml_config_store import YamlConfigStore
from nogologo.infrastructure.storage.yaml_credential_store import YamlCredentialStore


class TestYamlCredentialStore:
    def test_set_get_persists_across_instances(self, tmp_path):
        path = tmp_path / "credentials.yaml"
        YamlCredentialStore(path, environ={}).set(ProviderId.OPENAI, "sk-1")

        store = YamlCredentialStore(path, environ={})

        assert store.get(ProviderId.OPENAI) == "sk-1"
        assert store.get(ProviderId.XAI) is None

    def test_file_is_private(self, tmp_path):
        path = tmp_path / "credentials.yaml"
        YamlCredentialStore(path, environ={}).set(ProviderId.XAI, "xai-1")

        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600

    def test_environment_overrides_file(self, tmp_path):
        path = tmp_path / "credentials.yaml"
        YamlCredentialStore(path, environ={}).set(ProviderId.GEMINI, "from-file")

        store = YamlCredentialStore(path, environ={"GEMINI_API_KEY": "from-env"})

        assert store.get(ProviderId.GEMINI) == "from-env"

    def test_delete_all(self, tmp_path):
        store = YamlCredentialStore(tmp_path / "credentials.yaml", environ={})
        store.set(ProviderId.XAI, "a")
        store.set(ProviderId.OPENAI, "b")

        store.delete_all()

        assert store.configured_providers() == {p: False for p in ProviderId}

    def test_replace_all_skips_blank_keys(self, tmp_path):
        store = YamlCredentialStore(tmp_path / "credentials.yaml", environ={})
        store.set(ProviderId.GEMINI, "old")

        store.replace_all({ProviderId.XAI: " xai-2 ", ProviderId.OPENAI: "", ProviderId.GEMINI: "  "})

        assert store.get(ProviderId.XAI) == "xai-2"
        assert store.get(ProviderId.OPENAI) is None
        assert store.get(ProviderId.GEMINI) is None

    def test_corrupt_file_raises_persistence_error(self, tmp_path):
        path = tmp_path / "credentials.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(PersistenceError):
            YamlCredentialStore(path, environ={}).get(ProviderId.XAI)

    def test_unwritable_location_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        store = YamlCredentialStore(blocker / "credentials.yaml", environ={})

        with pytest.raises(PersistenceError):
            store.set(ProviderId.XAI, "key")

    def test_empty_key_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            YamlCredentialStore(tmp_path / "c.yaml", environ={}).set(ProviderId.XAI, "")
        with pytest.raises(ValueError):
            YamlCredentialStore(tmp_path / "c.yaml", environ={}).set(ProviderId.XAI, "   ")

    def test_set_strips_whitespace(self, tmp_path):
        path = tmp_path / "credentials.yaml"
        YamlCredentialStore(path, environ={}).set(ProviderId.OPENAI, "  sk-1 \n")

        assert YamlCredentialStore(path, environ={}).get(ProviderId.OPENAI) == "sk-1"
        assert yaml.safe_load(path.read_text()) == {"openai": "sk-1"}


class TestYamlConfigStore:
    def test_missing_file_gives_defaults(self, tmp_path):
        store = YamlConfigStore(tmp_path / "providers.yaml")

        assert store.load(ProviderId.XAI) == XAIConfig()
        assert store.load(ProviderId.OPENAI) == OpenAIConfig()

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "providers.yaml"
        store = YamlConfigStore(path)

        store.save(OpenAIConfig(model=OpenAIModel.DALL_E_3, size=ImageSize.LANDSCAPE))
        store.save(GeminiConfig(safety=SafetySetting.BLOCK_LOW_AND_ABOVE))

        reloaded = YamlConfigStore(path)
        assert reloaded.load(ProviderId.OPENAI).model is OpenAIModel.DALL_E_3
        assert reloaded.load(ProviderId.OPENAI).size is ImageSize.LANDSCAPE
        assert reloaded.load(ProviderId.GEMINI).safety is SafetySetting.BLOCK_LOW_AND_ABOVE

        data = yaml.safe_load(path.read_text())
        assert data["openai"]["size"] == "1536x1024"

    def test_invalid_section_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "providers.yaml"
        path.write_text("openai:\n  model: dall-e-9\n")

        assert YamlConfigStore(path).load(ProviderId.OPENAI) == OpenAIConfig()

    def test_reset(self, tmp_path):
        store = YamlConfigStore(tmp_path / "providers.yaml")
        store.save(XAIConfig(model="grok-custom"))

        assert store.reset(ProviderId.XAI) == XAIConfig()
        assert store.load(ProviderId.XAI) == XAIConfig()


class TestInMemoryStores:
    def test_credentials(self):
        store = InMemoryCredentialStore({ProviderId.XAI: "k"})

        assert store.get("xai") == "k"
        store.delete_all()
        assert store.get(ProviderId.XAI) is None

    def test_configs(self):
        store = InMemoryConfigStore(XAIConfig(model="custom"))

        assert store.load(ProviderId.XAI).model == "custom"
        assert store.reset(ProviderId.XAI) == XAIConfig()
