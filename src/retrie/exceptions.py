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
"""Exception hierarchy for retrie.

All library exceptions inherit from RetrieException, so callers can catch
the base class to handle every retrie error, or a subclass for targeted
handling.

Errors raised by the retried operation itself are never wrapped: the last
one is surfaced unchanged through the handle's future once the retry
budget is exhausted.
"""

from __future__ import annotations


class RetrieException(Exception):
    """Base exception for all retrie errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "RETRIE_CONFIG").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ValidationException(RetrieException):
    """Input validation failures."""


class ConfigException(ValidationException):
    """Invalid retry configuration. Raised synchronously, never retried."""


class RetryCancelledException(RetrieException):
    """Default cause of a cancelled retry execution."""

    def __init__(
        self,
        message: str = "Cancelled.",
        code: str | None = "RETRIE_CANCELLED",
        context: dict | None = None,
    ) -> None:
        super().__init__(message, code=code, context=context)
