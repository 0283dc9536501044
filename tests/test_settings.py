import importlib
import os
from types import ModuleType

import pytest

from schema_registry_helper.registry.client import SchemaRegistryClient


def _reload_settings_with_env(
    monkeypatch: pytest.MonkeyPatch, env: dict[str, str | None]
) -> ModuleType:
    # Clear related envs first to avoid leakage across tests
    prefixes = ("SCHEMA_REGISTRY_", "LOG_")
    for key in list(os.environ.keys()):
        if key.startswith(prefixes):
            monkeypatch.delenv(key, raising=False)

    for k, v in env.items():
        if v is None:
            monkeypatch.delenv(k, raising=False)
        else:
            monkeypatch.setenv(k, str(v))

    import schema_registry_helper.config.settings as settings

    settings = importlib.reload(settings)
    return settings


def test_registry_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {})

    assert settings.registry_settings.url == "http://localhost:8081"
    assert settings.registry_settings.timeout == 5.0
    assert settings.registry_settings.caching_enabled is True
    assert settings.registry_settings.auth is None


def test_registry_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(
        monkeypatch,
        {
            "SCHEMA_REGISTRY_URL": "https://registry.example.local",
            "SCHEMA_REGISTRY_USERNAME": "alice",
            "SCHEMA_REGISTRY_PASSWORD": "s3cr3t",
            "SCHEMA_REGISTRY_TIMEOUT": "2.5",
            "SCHEMA_REGISTRY_CACHING_ENABLED": "false",
        },
    )

    assert settings.registry_settings.url == "https://registry.example.local"
    assert settings.registry_settings.auth == ("alice", "s3cr3t")
    assert settings.registry_settings.timeout == 2.5
    assert settings.registry_settings.caching_enabled is False


def test_auth_requires_both_username_and_password(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(
        monkeypatch, {"SCHEMA_REGISTRY_USERNAME": "alice"}
    )
    assert settings.registry_settings.auth is None


def test_logging_settings_default(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {})
    assert settings.logging_settings.level == "INFO"
    assert settings.logging_settings.to_file is False


def test_logging_settings_env_override(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(monkeypatch, {"LOG_LEVEL": "DEBUG"})
    assert settings.logging_settings.level == "DEBUG"


def test_client_from_settings(monkeypatch: pytest.MonkeyPatch):
    settings = _reload_settings_with_env(
        monkeypatch,
        {
            "SCHEMA_REGISTRY_URL": "http://registry:8081/",
            "SCHEMA_REGISTRY_TIMEOUT": "3",
            "SCHEMA_REGISTRY_CACHING_ENABLED": "false",
        },
    )

    client = SchemaRegistryClient.from_settings(settings.registry_settings)

    assert client.base_url == "http://registry:8081"
    assert client.timeout == 3.0
    assert client.caching_enabled is False
