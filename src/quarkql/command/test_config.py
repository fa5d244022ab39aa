"""Tests for compile settings."""

import pytest
from pydantic import ValidationError

from quarkql.command.config import (
    SOLC_ENV_VAR,
    CompileSettings,
    load_settings,
    resolve_settings,
    save_settings,
)


def test_defaults():
    settings = CompileSettings()

    assert settings.solc_path == "solc"
    assert settings.evm_version == "paris"
    assert settings.optimizer.enabled is True
    assert settings.optimizer.runs == 1
    assert settings.object_name == "QuarkCommand"


def test_load_yaml(tmp_path):
    path = tmp_path / "quarkql.yaml"
    path.write_text(
        "evm_version: shanghai\noptimizer:\n  enabled: false\n  runs: 10\n"
    )

    settings = load_settings(path)

    assert settings.evm_version == "shanghai"
    assert settings.optimizer.enabled is False
    assert settings.optimizer.runs == 10
    assert settings.solc_path == "solc"


def test_load_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "quarkql.yaml"
    path.write_text("")

    assert load_settings(path) == CompileSettings()


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_invalid_runs_rejected():
    with pytest.raises(ValidationError):
        CompileSettings(optimizer={"runs": -1})


def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "quarkql.yaml"
    settings = CompileSettings(solc_path="/usr/bin/solc", object_name="Script")

    save_settings(settings, path)

    assert load_settings(path) == settings


def test_resolve_applies_env_override(tmp_path, monkeypatch):
    path = tmp_path / "quarkql.yaml"
    path.write_text("solc_path: /from/file\n")
    monkeypatch.setenv(SOLC_ENV_VAR, "/from/env")

    assert resolve_settings(path).solc_path == "/from/env"


def test_resolve_without_file(tmp_path, monkeypatch):
    monkeypatch.delenv(SOLC_ENV_VAR, raising=False)

    assert resolve_settings(tmp_path / "absent.yaml") == CompileSettings()
    assert resolve_settings() == CompileSettings()
