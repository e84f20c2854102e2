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
"""Backoff policy: how the delay grows from one retry to the next."""

from __future__ import annotations

from retrie.types import BackoffType, RetrieConfig


def next_timeout(current: int | float, config: RetrieConfig) -> int | float:
    """Return the delay to apply after *current*, clamped to ``max_timeout``.

    Linear adds ``backoff`` to the current delay, exponential multiplies by
    it. A zero multiplier collapses the delay to 0.
    """
    if config.backoff_type is BackoffType.EXPONENTIAL:
        grown = current * config.backoff
    else:
        grown = current + config.backoff
    return min(config.max_timeout, grown)
