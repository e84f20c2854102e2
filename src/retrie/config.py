# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Configuration loading from dicts, YAML/TOML files and env vars, with model binding."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from retrie.exceptions import ConfigException

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_CONFIG_PROPERTIES_ATTR = "__retrie_config_prefix__"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a Pydantic model as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="retrie")
        class RetrieConfig(BaseModel):
            max_retries: int = 3
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def _env_key(key: str) -> str:
    # retrie.max_retries -> RETRIE_MAX_RETRIES, retrie.logging.format -> RETRIE_LOGGING_FORMAT
    return "RETRIE_" + key.removeprefix("retrie.").upper().replace(".", "_").replace("-", "_")


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (RETRIE_SECTION_KEY format)
    2. Configuration dict / YAML / TOML file values
    3. Model defaults

    Sections may nest: ``retrie`` holds the retry fields alongside the
    ``retrie.logging`` section read by the logging adapter.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """List of config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
    ) -> Config:
        """Load configuration from a YAML or TOML file.

        Profile overlays named ``<stem>-<profile><suffix>`` next to the file
        are merged on top, in the order given. A missing base file yields an
        empty configuration.
        """
        path = Path(path)
        instance = cls()
        if not path.exists():
            return instance

        instance._merge_file(path, str(path))
        for profile in active_profiles or []:
            profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
            if profile_path.exists():
                instance._merge_file(profile_path, f"{profile_path} (profile: {profile})")
        return instance

    def _merge_file(self, path: Path, source: str) -> None:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                loaded = tomllib.load(f) or {}
        else:
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
        self._data = self._deep_merge(self._data, loaded)
        self._loaded_sources.append(source)

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key. A matching env var wins, as a raw string."""
        env_val = os.environ.get(_env_key(key))
        if env_val is not None:
            return env_val

        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get the dict stored under a dot-notation prefix, or an empty dict."""
        section = self.get(prefix, {})
        return section if isinstance(section, dict) else {}

    def bind(self, model: type[M]) -> M:
        """Bind the model's prefix section to a @config_properties Pydantic model.

        Only keys naming a model field (or its alias) are taken from the
        section, so nested sections sharing the prefix are left alone.
        ``RETRIE_<FIELD>`` env vars override file values and are parsed as
        YAML scalars, so ``RETRIE_MAX_RETRIES=9`` binds as the integer 9.

        Raises:
            ConfigException: If the model rejects the collected values.
        """
        prefix = getattr(model, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{model.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)
        data: dict[str, Any] = {}
        for name, field in model.model_fields.items():
            for key in (field.alias, name):
                if key is not None and key in section:
                    data[name] = section[key]
                    break
            env_val = os.environ.get(_env_key(f"{prefix}.{name}"))
            if env_val is not None:
                data[name] = yaml.safe_load(env_val)

        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise ConfigException(
                f"Configuration validation failed for '{model.__name__}' (prefix='{prefix}'):\n{exc}",
                code="RETRIE_CONFIG",
                context={"errors": exc.errors()},
            ) from exc
