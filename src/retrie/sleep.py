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
"""Cancellable delay primitive used between retry attempts."""

from __future__ import annotations

import asyncio


def _wake(waiter: asyncio.Future[bool], elapsed: bool) -> None:
    if not waiter.done():
        waiter.set_result(elapsed)


class CancellableSleep:
    """A sleep that can be interrupted from outside.

    Wraps ``loop.call_later`` so that :meth:`cancel` both releases the
    pending timer handle and wakes the waiter immediately, instead of the
    waiter polling or running out the full duration.

    Only one wait may be pending at a time. Must be used from the event
    loop thread.
    """

    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None
        self._waiter: asyncio.Future[bool] | None = None

    @property
    def pending(self) -> bool:
        """Whether a wait is currently in progress."""
        return self._waiter is not None and not self._waiter.done()

    async def wait(self, duration_ms: int | float) -> bool:
        """Sleep for *duration_ms* milliseconds.

        Returns:
            True if the full duration elapsed, False if :meth:`cancel` woke it.
        """
        if self.pending:
            raise RuntimeError("CancellableSleep is already waiting")

        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[bool] = loop.create_future()
        self._waiter = waiter
        self._handle = loop.call_later(max(duration_ms, 0) / 1000, _wake, waiter, True)
        try:
            return await waiter
        finally:
            self._handle.cancel()
            self._handle = None
            self._waiter = None

    def cancel(self) -> None:
        """Release the pending timer and wake the waiter. No-op if idle."""
        if self._handle is not None:
            self._handle.cancel()
        if self._waiter is not None:
            _wake(self._waiter, False)
