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
"""Retry decorator built on the retry engine."""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from typing import Any

from retrie.engine import Retrie, retrie
from retrie.types import RetrieConfig
from retrie.validation import validate_config


def retry(
    config: RetrieConfig | Mapping[str, Any] | None = None,
    /,
    **overrides: Any,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator that retries a function with backoff.

    Each call starts a fresh retry execution and awaits its outcome, so the
    decorated function is always a coroutine function. The wrapped function
    may be sync or async.

    Args:
        config: A RetrieConfig, a mapping of its fields, or None for defaults.
        **overrides: Individual fields overriding *config*.

    Raises:
        ConfigException: At decoration time, if the configuration is invalid.
    """
    settings = validate_config(config, **overrides)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            def attempt(_: Retrie[Any]) -> Any:
                return func(*args, **kwargs)

            return await retrie(attempt, settings)

        return wrapper

    return decorator
