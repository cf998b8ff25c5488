"""Rest countdown and the once-per-second tick sources that drive it."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

log = logging.getLogger(__name__)


def format_clock(seconds: int) -> str:
    seconds = max(int(seconds), 0)
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class RestTimer:
    """Single countdown. ``on_expire(natural)`` fires once per run, with
    ``natural=True`` only when the countdown ran out by itself."""

    def __init__(self, on_expire: Callable[[bool], None]):
        self.on_expire = on_expire
        self.remaining = 0
        self.running = False

    def start(self, seconds: int) -> None:
        self.remaining = max(int(seconds), 0)
        self.running = True

    def tick(self) -> None:
        if not self.running:
            return
        self.remaining = max(self.remaining - 1, 0)
        if self.remaining == 0:
            self._expire(natural=True)

    def adjust(self, delta: int) -> None:
        self.remaining = max(self.remaining + int(delta), 0)

    def skip(self) -> None:
        if self.running:
            self._expire(natural=False)

    def stop(self) -> None:
        self.running = False

    def _expire(self, *, natural: bool) -> None:
        self.running = False
        log.debug("rest timer expired (natural=%s)", natural)
        self.on_expire(natural)

    @property
    def display(self) -> str:
        return format_clock(self.remaining)


class TickHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> TickHandle: ...


class _LoopTicker:
    """Fires ``callback`` every ``interval`` seconds of loop time.

    Deadlines are fixed up front so ticks do not drift, and the callback runs
    in the loop's default executor so a blocking save never stalls the loop.
    Safe to create and cancel from any thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]):
        self.loop = loop
        self.interval = interval
        self.callback = callback
        self.cancelled = False
        self._handle: asyncio.TimerHandle | None = None
        self._deadline = 0.0
        loop.call_soon_threadsafe(self._arm)

    def _arm(self) -> None:
        if self.cancelled:
            return
        self._deadline = self.loop.time() + self.interval
        self._handle = self.loop.call_at(self._deadline, self._fire)

    def _fire(self) -> None:
        if self.cancelled:
            return
        self._deadline += self.interval
        self._handle = self.loop.call_at(self._deadline, self._fire)
        self.loop.run_in_executor(None, self._run)

    def _run(self) -> None:
        if self.cancelled:
            return
        try:
            self.callback()
        except Exception:
            log.exception("tick callback failed")

    def _drop_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()

    def cancel(self) -> None:
        self.cancelled = True
        if not self.loop.is_closed():
            self.loop.call_soon_threadsafe(self._drop_handle)


class AsyncioScheduler:
    """Repeating callbacks driven by the application's event loop.

    ``attach`` it to the running loop at startup; after that ``call_every``
    may be used from request handlers running in the threadpool.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self.loop = loop

    def attach(self, loop: asyncio.AbstractEventLoop | None) -> None:
        self.loop = loop

    def call_every(self, interval: float, callback: Callable[[], None]) -> TickHandle:
        if self.loop is None:
            raise RuntimeError("scheduler is not attached to an event loop")
        return _LoopTicker(self.loop, interval, callback)


class _ManualTicker:
    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self.elapsed = 0.0
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Ticks only when told to. Used by tests and scripted sessions."""

    def __init__(self) -> None:
        self.tickers: list[_ManualTicker] = []

    def call_every(self, interval: float, callback: Callable[[], None]) -> TickHandle:
        ticker = _ManualTicker(interval, callback)
        self.tickers.append(ticker)
        return ticker

    @property
    def live(self) -> list[_ManualTicker]:
        return [t for t in self.tickers if not t.cancelled]

    def advance(self, seconds: int = 1) -> None:
        for _ in range(seconds):
            for ticker in self.live:
                ticker.elapsed += 1
                if ticker.elapsed >= ticker.interval and not ticker.cancelled:
                    ticker.elapsed = 0
                    ticker.callback()
        self.tickers = self.live
