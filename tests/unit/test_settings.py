from pathlib import Path

import pytest

from nogologo.infrastructure.config.settings import Settings, load_settings


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    settings = load_settings(tmp_path / "absent.yaml")

    assert settings.http.timeout == 60.0
    assert settings.logging.level == "INFO"
    assert settings.storage.album == "NoGoLogo"
    assert settings.generation.best_effort_decode is True


def test_load_from_yaml(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "logging:\n"
        "  level: WARNING\n"
        "  format: json\n"
        "http:\n"
        "  timeout: 30\n"
        "storage:\n"
        f"  data_dir: {tmp_path / 'data'}\n"
        "  album: Logos\n"
        "generation:\n"
        "  default_count: 4\n"
        "  best_effort_decode: false\n"
    )

    settings = Settings.load(config_path)

    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "json"
    assert settings.http.timeout == 30.0
    assert settings.storage.credentials_path == tmp_path / "data" / "credentials.yaml"
    assert settings.storage.providers_path == tmp_path / "data" / "providers.yaml"
    assert settings.storage.album == "Logos"
    assert settings.generation.default_count == 4
    assert settings.generation.best_effort_decode is False


def test_config_path_from_environment(tmp_path, monkeypatch):
    config_path = tmp_path / "custom.yaml"
    config_path.write_text("storage:\n  album: FromEnv\n")
    monkeypatch.setenv("NOGOLOGO_CONFIG", str(config_path))

    assert Settings.load().storage.album == "FromEnv"


def test_non_positive_timeout_rejected(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("http:\n  timeout: 0\n")

    with pytest.raises(ValueError):
        Settings.load(config_path)
