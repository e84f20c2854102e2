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
"""Pydantic-backed validation of retry configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from retrie.exceptions import ConfigException
from retrie.types import RetrieConfig


def validate_config(
    config: RetrieConfig | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> RetrieConfig:
    """Validate a retry configuration, applying keyword overrides on top.

    Accepts an existing RetrieConfig, a mapping of field names (or their
    camelCase aliases), or None for the defaults.

    Raises:
        ConfigException: If any field is invalid, with structured error details.
    """
    if isinstance(config, RetrieConfig):
        if not overrides:
            return config
        data: dict[str, Any] = config.model_dump()
    elif config is None:
        data = {}
    elif isinstance(config, Mapping):
        data = dict(config)
    else:
        raise ConfigException(
            f"Invalid configuration: expected RetrieConfig or mapping, got {type(config).__name__}",
            code="RETRIE_CONFIG",
        )

    data.update(overrides)
    try:
        return RetrieConfig.model_validate(data)
    except ValidationError as exc:
        errors = exc.errors()
        detail = "; ".join(
            f"{'.'.join(str(loc) for loc in e['loc']) or 'config'}: {e['msg']}" for e in errors
        )
        raise ConfigException(
            f"Invalid configuration: {detail}",
            code="RETRIE_CONFIG",
            context={"errors": errors},
        ) from exc
