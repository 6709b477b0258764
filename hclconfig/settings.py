import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml

from hclconfig.errors import ConfigError

SETTINGS_FILE = "hclconfig.yaml"


def _default_cache_dir() -> str:
    return os.path.join(os.path.expanduser("~"), ".hclconfig", "modules")


@dataclass
class Settings:
    types: List[str] = field(default_factory=list)   # extra schema-less resource types
    cache_dir: str = field(default_factory=_default_cache_dir)
    force_fetch: bool = False
    include_disabled_dependencies: bool = True


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Read settings from ``path``, or from 'hclconfig.yaml' in the working
    directory when it exists. Missing keys keep their defaults.
    """
    explicit = path is not None
    path = path or SETTINGS_FILE
    if not os.path.exists(path):
        if explicit:
            raise ConfigError(f"settings file '{path}' does not exist")
        return Settings()

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"unable to read settings file '{path}': {exc}") from exc

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"settings file '{path}' must contain a mapping")

    settings = Settings()
    types = data.get("types", [])
    if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
        raise ConfigError(f"'types' in '{path}' must be a list of strings")
    settings.types = types

    if data.get("cache_dir"):
        settings.cache_dir = os.path.expanduser(str(data["cache_dir"]))
    settings.force_fetch = bool(data.get("force_fetch", False))
    settings.include_disabled_dependencies = bool(data.get("include_disabled_dependencies", True))
    return settings
