"""
Readiness latch for the Proxy Service.
"""

import asyncio
import threading
from typing import Callable, List, Optional, Tuple

from shared.logging import get_logger

READY_MESSAGE = "Successfully synchronized with the evaluation client. Proxy is now ready to receive traffic."


def _resolve(future: "asyncio.Future[bool]") -> None:
    if not future.done():
        future.set_result(True)


class ReadinessGate:
    """One-way NotReady -> Ready latch.

    ``mark_ready`` may be called from any thread and any number of times; only
    the first call flips the latch, logs, and notifies listeners and waiters.
    Nothing resets the gate.
    """

    def __init__(self, logger=None):
        self.logger = logger or get_logger("proxy.readiness")
        self._lock = threading.Lock()
        self._ready = False
        self._listeners: List[Callable[[], None]] = []
        self._waiters: List[Tuple[asyncio.AbstractEventLoop, "asyncio.Future[bool]"]] = []

    def is_ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> bool:
        """Open the gate. Returns True only for the call that opened it."""
        with self._lock:
            if self._ready:
                return False
            self._ready = True
            listeners, self._listeners = self._listeners, []
            waiters, self._waiters = self._waiters, []

        self.logger.info(READY_MESSAGE)

        for listener in listeners:
            listener()
        for loop, future in waiters:
            if not loop.is_closed():
                loop.call_soon_threadsafe(_resolve, future)
        return True

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once when the gate opens (immediately if already open)."""
        with self._lock:
            if not self._ready:
                self._listeners.append(callback)
                return
        callback()

    async def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Wait until the gate opens; False if ``timeout`` elapses first."""
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._ready:
                return True
            future = loop.create_future()
            waiter = (loop, future)
            self._waiters.append(waiter)

        try:
            await asyncio.wait_for(asyncio.shield(future), timeout)
        except asyncio.TimeoutError:
            with self._lock:
                if waiter in self._waiters:
                    self._waiters.remove(waiter)
            return False
        return True
