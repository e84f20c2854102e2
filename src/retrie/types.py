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
"""Configuration, outcome and state types for retry executions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from retrie.config import config_properties

T = TypeVar("T")

# Strict so that bools and numeric strings are rejected; Config.bind parses env strings first.
Count = Annotated[int, Field(strict=True, ge=0)]
Amount = Annotated[float, Field(strict=True, ge=0)]


class BackoffType(str, Enum):
    """How the delay grows between retries."""

    LINEAR = "linear"
    EXPONENTIAL = "exponential"


@config_properties(prefix="retrie")
class RetrieConfig(BaseModel):
    """Immutable retry configuration.

    Timeouts are in milliseconds. ``max_retries`` counts retries after the
    first attempt, so an always-failing operation runs ``max_retries + 1``
    times. Fields also accept their camelCase aliases on input
    (``maxRetries``, ``minTimeout``, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
        loc_by_alias=False,
    )

    max_retries: Count = 3
    min_timeout: Count = 1000
    max_timeout: Count = 60000
    backoff: Count | Amount = 100
    backoff_type: BackoffType = BackoffType.LINEAR

    @model_validator(mode="after")
    def _check_timeout_bounds(self) -> RetrieConfig:
        if self.max_timeout < self.min_timeout:
            raise ValueError("max_timeout must be greater than or equal to min_timeout")
        return self


@dataclass(frozen=True)
class Success(Generic[T]):
    """Terminal outcome carrying the operation's value."""

    value: T
    type: Literal["success"] = "success"


@dataclass(frozen=True)
class Failure:
    """Terminal outcome carrying the failure cause."""

    error: BaseException
    type: Literal["error"] = "error"


Result = Success[Any] | Failure


@dataclass(frozen=True)
class RetrieState:
    """Point-in-time view of a retry execution.

    ``finished`` is only true when the loop ran to success or ran out of
    retries; a cancelled execution is ``cancelled`` but never ``finished``.
    ``active`` is false once either terminal transition happened, at which
    point ``result`` is set and never changes again.
    """

    started_at: datetime
    retries: int
    timeout: int | float
    cancelled: bool = False
    finished: bool = False
    active: bool = True
    result: Result | None = None
