"""YAML configuration loader.

Profile files may name a parent with an ``extends`` key; the parent is
loaded first and the child's values are merged over it. The merged
``assistant:`` section is then checked against the config dataclasses, so
a typo in a key or a wrongly typed value fails with a ConfigError that
names the offending setting.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Any, get_args, get_type_hints

import yaml

from ..errors import ConfigError
from . import (
    AssistantConfig,
    LoggingConfig,
    StorageConfig,
    UserConfig,
    VoiceConfig,
)

logger = logging.getLogger(__name__)

SECTIONS: dict[str, type] = {
    "storage": StorageConfig,
    "voice": VoiceConfig,
    "logging": LoggingConfig,
    "user": UserConfig,
}


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into mappings."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must hold a mapping, not {type(data).__name__}")
    return data


def load_yaml_with_inheritance(path: Path, _seen: tuple[Path, ...] = ()) -> dict[str, Any]:
    """Load a YAML file, resolving its ``extends`` chain.

    Raises:
        FileNotFoundError: If the file or one of its parents is missing.
        ConfigError: If a file is not a YAML mapping or the chain loops.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    resolved = path.resolve()
    if resolved in _seen:
        raise ConfigError(f"Config inheritance loops back to {path}")

    data = _read_yaml(path)
    parent = data.pop("extends", None)
    if parent is None:
        return data

    logger.debug(f"{path.name} extends {parent}")
    base = load_yaml_with_inheritance(path.parent / parent, (*_seen, resolved))
    return deep_merge(base, data)


def _matches(value: Any, hint: Any) -> bool:
    allowed = get_args(hint) or (hint,)
    if value is None:
        return type(None) in allowed
    if isinstance(value, bool):
        return bool in allowed
    if isinstance(value, int) and float in allowed:
        return True
    return any(isinstance(value, t) for t in allowed if isinstance(t, type))


def _build_section(name: str, raw: Any) -> Any:
    config_cls = SECTIONS[name]
    if raw is None:
        return config_cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"assistant.{name} must be a mapping")

    hints = get_type_hints(config_cls)
    known = {f.name for f in dataclasses.fields(config_cls)}

    for key, value in raw.items():
        if key not in known:
            raise ConfigError(
                f"Unknown setting assistant.{name}.{key} (expected one of: "
                f"{', '.join(sorted(known))})"
            )
        if not _matches(value, hints[key]):
            raise ConfigError(
                f"assistant.{name}.{key} has the wrong type: {value!r} "
                f"({type(value).__name__})"
            )

    return config_cls(**raw)


def dict_to_config(data: dict[str, Any]) -> AssistantConfig:
    """Build an AssistantConfig from the parsed YAML.

    Missing or empty sections fall back to their defaults.

    Raises:
        ConfigError: On unknown sections or keys, or mistyped values.
    """
    section = data.get("assistant") or {}
    if not isinstance(section, dict):
        raise ConfigError("'assistant' must be a mapping")

    unknown = set(section) - set(SECTIONS)
    if unknown:
        raise ConfigError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

    return AssistantConfig(**{name: _build_section(name, section.get(name)) for name in SECTIONS})


class YAMLConfigLoader:
    """Loads profile files from a config directory."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the loader.

        Args:
            config_dir: Directory holding ``<profile>.yaml`` files.
                        Defaults to ``config/`` at the project root.
        """
        self._config_dir = config_dir or Path(__file__).parents[3] / "config"

    def load(self, path: Path) -> AssistantConfig:
        return dict_to_config(load_yaml_with_inheritance(path))

    def load_profile(self, profile: str) -> AssistantConfig:
        return self.load(self._config_dir / f"{profile}.yaml")

    def get_config_dir(self) -> Path:
        return self._config_dir


def load_config(
    path: str | Path | None = None,
    profile: str | None = None,
    config_dir: Path | None = None,
) -> AssistantConfig:
    """Load assistant configuration.

    Args:
        path: Config file to load; wins over ``profile``.
        profile: Profile name ('dev', 'test'), defaulting to dev.
        config_dir: Directory holding profile files.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is malformed.
    """
    loader = YAMLConfigLoader(config_dir)
    if path is not None:
        return loader.load(Path(path))
    return loader.load_profile(profile or "dev")


__all__ = [
    "SECTIONS",
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
