"""Compile settings for quarkql.

Settings can live in a YAML file:

    solc_path: /usr/local/bin/solc
    evm_version: paris
    optimizer:
      enabled: true
      runs: 1
    object_name: QuarkCommand

The QUARKQL_SOLC environment variable overrides `solc_path`.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from quarkql.command.spec import DEFAULT_OBJECT_NAME

SOLC_ENV_VAR = "QUARKQL_SOLC"


class OptimizerSettings(BaseModel):
    """solc optimizer settings (applied to Yul inputs only)."""

    enabled: bool = Field(default=True, description="Run the Yul optimizer")
    runs: int = Field(default=1, ge=0, description="Expected executions per opcode")


class CompileSettings(BaseModel):
    """Settings for compiling commands."""

    solc_path: str = Field(default="solc", description="solc executable")
    evm_version: str = Field(default="paris", description="Target EVM version")
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    object_name: str = Field(
        default=DEFAULT_OBJECT_NAME, description="Yul object name of commands"
    )


def load_settings(path: Path) -> CompileSettings:
    """Load settings from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return CompileSettings(**data)


def save_settings(settings: CompileSettings, path: Path) -> None:
    """Save settings to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(exclude_none=True)

    with open(path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)


def resolve_settings(path: Path | None = None) -> CompileSettings:
    """Load settings from `path` when it exists, then apply env overrides."""
    if path is not None and path.exists():
        settings = load_settings(path)
    else:
        settings = CompileSettings()

    solc_path = os.environ.get(SOLC_ENV_VAR)
    if solc_path:
        settings = settings.model_copy(update={"solc_path": solc_path})

    return settings
