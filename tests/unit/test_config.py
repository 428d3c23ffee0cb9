"""Unit tests for settings."""

import pytest

from accessgraph.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)
    config = settings.engine_config()

    assert config.entity_types.role == "Role"
    assert config.entity_types.permission == "Permission"
    assert config.table_names.accesses == "accesses"
    assert settings.environment == "development"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROLE_ENTITY_TYPE", "Group")
    monkeypatch.setenv("TABLE_ROLE_MEMBERS", "group_members")
    monkeypatch.setenv("LOG_JSON", "false")

    settings = Settings(_env_file=None)
    config = settings.engine_config()

    assert config.entity_types.role == "Group"
    assert config.table_names.role_members == "group_members"
    assert settings.log_json is False


def test_empty_entity_type_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERMISSION_ENTITY_TYPE", "")
    with pytest.raises(ValueError):
        Settings(_env_file=None)
