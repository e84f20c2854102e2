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
"""Retrie — retry an async operation with linear or exponential backoff."""

from retrie.backoff import next_timeout
from retrie.config import Config, config_properties
from retrie.decorators import retry
from retrie.engine import Retrie, retrie
from retrie.exceptions import (
    ConfigException,
    RetrieException,
    RetryCancelledException,
    ValidationException,
)
from retrie.sleep import CancellableSleep
from retrie.types import BackoffType, Failure, Result, RetrieConfig, RetrieState, Success
from retrie.validation import validate_config

__version__ = "1.0.0"

__all__ = [
    # Engine
    "Retrie",
    "retrie",
    "retry",
    # Types
    "BackoffType",
    "Failure",
    "Result",
    "RetrieConfig",
    "RetrieState",
    "Success",
    # Collaborators
    "CancellableSleep",
    "next_timeout",
    "validate_config",
    # Configuration
    "Config",
    "config_properties",
    # Exceptions
    "ConfigException",
    "RetrieException",
    "RetryCancelledException",
    "ValidationException",
]
