"""Picker configuration: defaults, YAML file, environment, CLI overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

from path_picker.core.models import CompletionKind

ROOT_ENV_VAR = "PATH_PICKER_ROOT"


class ConfigError(ValueError):
    """Raised when a configuration file or value cannot be used."""


@dataclass
class PickerConfig:
    kind: CompletionKind = CompletionKind.ALL
    workspace_root: Path | None = None  # None: anchor relative input on $HOME
    title: str = "Select a path"
    placeholder: str = "Type a path, Enter to drill in / accept"

    def with_overrides(self, **overrides) -> PickerConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "kind" in changes:
            changes["kind"] = _parse_kind(changes["kind"])
        if "workspace_root" in changes:
            changes["workspace_root"] = Path(
                os.path.abspath(Path(changes["workspace_root"]).expanduser())
            )
        return replace(self, **changes)


def _parse_kind(value: object) -> CompletionKind:
    try:
        return CompletionKind(value)
    except ValueError:
        choices = ", ".join(k.value for k in CompletionKind)
        raise ConfigError(f"Invalid kind {value!r} (expected one of: {choices})") from None


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "path-picker" / "config.yaml"


def load_config_file(path: Path) -> dict:
    """Read a YAML mapping of config keys. Unknown keys are dropped."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    known = {f.name for f in fields(PickerConfig)}
    return {k: v for k, v in raw.items() if k in known}


def load_config(config_file: Path | None = None, **overrides) -> PickerConfig:
    """Build the effective config.

    Precedence, lowest first: defaults, YAML file (*config_file*, or the
    default location when it exists), $PATH_PICKER_ROOT, *overrides*.
    """
    config = PickerConfig()

    if config_file is None:
        candidate = default_config_path()
        if candidate.is_file():
            config_file = candidate
    if config_file is not None:
        config = config.with_overrides(**load_config_file(config_file))

    env_root = os.environ.get(ROOT_ENV_VAR)
    if env_root:
        config = config.with_overrides(workspace_root=env_root)

    return config.with_overrides(**overrides)
