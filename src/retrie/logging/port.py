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
"""LoggingPort and the ``configure_logging`` entry point."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from retrie.config import Config
from retrie.logging.structlog_adapter import StructlogAdapter


@runtime_checkable
class LoggingPort(Protocol):
    """What retrie needs from a logging backend.

    ``configure`` reads the ``retrie.logging`` section, ``get_logger``
    returns a structured logger, ``set_level`` adjusts one stdlib logger
    such as ``retrie.engine``.
    """

    def configure(self, config: Config) -> None: ...
    def get_logger(self, name: str) -> Any: ...
    def set_level(self, name: str, level: str) -> None: ...


def configure_logging(config: Config, port: LoggingPort | None = None) -> LoggingPort:
    """Configure retrie's logging backend and return it.

    Defaults to :class:`~retrie.logging.structlog_adapter.StructlogAdapter`.

    Raises:
        TypeError: If *port* does not implement LoggingPort.
    """
    if port is None:
        port = StructlogAdapter()
    elif not isinstance(port, LoggingPort):
        raise TypeError(f"{type(port).__name__} does not implement LoggingPort")

    port.configure(config)
    return port
