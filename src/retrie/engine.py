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
"""Retry engine: runs an operation until it succeeds, runs out of retries, or is cancelled."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Awaitable, Callable, Generator, Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from retrie.backoff import next_timeout
from retrie.exceptions import RetryCancelledException
from retrie.sleep import CancellableSleep
from retrie.types import Failure, Result, RetrieConfig, RetrieState, Success
from retrie.validation import validate_config

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Retrie(Generic[T]):
    """Handle on a running retry execution.

    Exposes the eventual outcome as an ``asyncio.Future`` (:attr:`promise`,
    or simply ``await handle``), a :meth:`cancel` operation, and a frozen
    :attr:`state` snapshot.

    All state changes go through a lock and the terminal transition is a
    compare-and-set on ``active``: whichever of the attempt loop or
    :meth:`cancel` reaches it first wins, and the loser's update is dropped.
    :meth:`cancel` may be called from any thread.

    Cancelling :attr:`promise` itself (e.g. ``asyncio.wait_for`` timing out
    while awaiting the handle) cancels the execution.
    """

    def __init__(
        self,
        operation: Callable[[Retrie[T]], T | Awaitable[T]],
        config: RetrieConfig,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._operation = operation
        self._config = config
        self._loop = loop
        self._lock = threading.RLock()
        self._state = RetrieState(
            started_at=datetime.now(timezone.utc),
            retries=0,
            timeout=config.min_timeout,
        )
        self._last_error: BaseException | None = None
        self._sleep = CancellableSleep()
        self._promise: asyncio.Future[T] = loop.create_future()
        self._promise.add_done_callback(self._on_promise_done)
        self._task: asyncio.Task[None] | None = None

    @property
    def promise(self) -> asyncio.Future[T]:
        """Future resolved with the operation's value or failed with the terminal error."""
        return self._promise

    @property
    def config(self) -> RetrieConfig:
        return self._config

    @property
    def state(self) -> RetrieState:
        """Immutable snapshot of the execution state at read time."""
        with self._lock:
            return self._state

    def __await__(self) -> Generator[Any, None, T]:
        return self._promise.__await__()

    def cancel(self, reason: BaseException | str | None = None) -> None:
        """Stop retrying and fail the execution.

        The cause is *reason* if given (a string is wrapped in
        RetryCancelledException), otherwise the last operation failure,
        otherwise a default RetryCancelledException. Does nothing once the
        execution has reached a terminal state.
        """
        if isinstance(reason, str):
            reason = RetryCancelledException(reason)

        with self._lock:
            if not self._state.active:
                return
            if reason is not None:
                cause = reason
            elif self._last_error is not None:
                cause = self._last_error
            else:
                cause = RetryCancelledException()
            self._terminate(Failure(cause), cancelled=True)
            retries = self._state.retries

        logger.info("Retry execution cancelled after %d retries: %r", retries, cause)
        self._call_in_loop(self._sleep.cancel)

    def _start(self) -> None:
        # The task's first step runs on a later loop iteration, so the caller
        # holds the handle before the first attempt.
        self._task = self._loop.create_task(self._run())

    async def _run(self) -> None:
        try:
            await self._attempt_loop()
        except asyncio.CancelledError:
            self.cancel()
            raise
        except BaseException as exc:
            # Non-Exception errors (KeyboardInterrupt, custom BaseException) are never retried.
            self._terminate(Failure(exc))
            raise

    async def _attempt_loop(self) -> None:
        while True:
            if not self.state.active:
                return

            try:
                value = await self._invoke()
            except Exception as exc:
                delay = self._record_failure(exc)
                if delay is None:
                    return
            else:
                if self._terminate(Success(value)):
                    logger.debug("Operation succeeded after %d retries", self.state.retries)
                else:
                    logger.debug("Discarding result of cancelled retry execution")
                return

            if not await self._sleep.wait(delay):
                return

            with self._lock:
                if not self._state.active:
                    return
                self._state = replace(self._state, retries=self._state.retries + 1)

    async def _invoke(self) -> T:
        result = self._operation(self)
        if inspect.isawaitable(result):
            return await result
        return result

    def _record_failure(self, exc: Exception) -> int | float | None:
        """Record a failed attempt and return the delay before the next one.

        Returns None when no further attempt should run, either because the
        execution was cancelled meanwhile or because retries are exhausted.
        """
        with self._lock:
            self._last_error = exc
            state = self._state
            if not state.active:
                logger.debug("Discarding failure of cancelled retry execution: %r", exc)
                return None

            if state.retries >= self._config.max_retries:
                self._terminate(Failure(exc))
                logger.info(
                    "Retries exhausted after %d attempts, last error: %r",
                    state.retries + 1,
                    exc,
                )
                return None

            delay = state.timeout
            self._state = replace(state, timeout=next_timeout(delay, self._config))

        logger.debug("Attempt %d failed: %r; retrying in %s ms", state.retries + 1, exc, delay)
        return delay

    def _terminate(self, outcome: Result, *, cancelled: bool = False) -> bool:
        """Move to a terminal state exactly once. Returns False if already terminal."""
        with self._lock:
            if not self._state.active:
                return False
            self._state = replace(
                self._state,
                cancelled=cancelled,
                finished=not cancelled,
                active=False,
                result=outcome,
            )
        self._call_in_loop(self._settle, outcome)
        return True

    def _settle(self, outcome: Result) -> None:
        if self._promise.done():
            logger.debug("Ignoring repeated settlement of retry execution: %r", outcome)
            return
        if isinstance(outcome, Success):
            self._promise.set_result(outcome.value)
        else:
            self._promise.set_exception(outcome.error)

    def _on_promise_done(self, promise: asyncio.Future[T]) -> None:
        if promise.cancelled():
            self.cancel()

    def _call_in_loop(self, callback: Callable[..., None], *args: Any) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            callback(*args)
        else:
            self._loop.call_soon_threadsafe(callback, *args)


def retrie(
    operation: Callable[[Retrie[T]], T | Awaitable[T]],
    config: RetrieConfig | Mapping[str, Any] | None = None,
    /,
    **overrides: Any,
) -> Retrie[T]:
    """Start retrying *operation* and return a handle on the execution.

    The operation receives the handle as its only argument, so it can read
    ``state`` or cancel itself. It may be a plain function or return an
    awaitable. Must be called from a running event loop.

    Args:
        operation: The fallible operation to run.
        config: A RetrieConfig, a mapping of its fields, or None for defaults.
        **overrides: Individual fields overriding *config*.

    Raises:
        ConfigException: If the configuration is invalid. Nothing is started.
    """
    settings = validate_config(config, **overrides)
    handle: Retrie[T] = Retrie(operation, settings, asyncio.get_running_loop())
    handle._start()
    return handle
