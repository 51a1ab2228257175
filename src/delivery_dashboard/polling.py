"""Recurring refresh timer built on a one-shot ``after``/``after_cancel`` host."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class TimerHost(Protocol):
    """One-shot timers, as offered by ``tk.Tk.after`` or the Qt host in ``gui``."""

    def after(self, ms: int, callback: Callable[[], None]) -> object: ...

    def after_cancel(self, timer_id: object) -> None: ...


class PollingHandle:
    """A live recurring timer. Owned by the :class:`PollingScheduler` that made it."""

    def __init__(self, interval_ms: int, on_tick: Callable[[], None]) -> None:
        self.interval_ms = interval_ms
        self.on_tick = on_tick
        self.active = True
        self._timer_id: object | None = None


class PollingScheduler:
    """Start and stop recurring timers.

    The first tick fires ``interval_ms`` after :meth:`start`, never
    immediately. Each firing re-arms a one-shot timer on the host.
    """

    def __init__(self, host: TimerHost) -> None:
        self._host = host
        self._handles: set[PollingHandle] = set()

    @property
    def active_count(self) -> int:
        return len(self._handles)

    def start(self, interval_ms: int, on_tick: Callable[[], None]) -> PollingHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        handle = PollingHandle(interval_ms, on_tick)
        self._handles.add(handle)
        self._arm(handle)
        return handle

    def stop(self, handle: PollingHandle | None) -> None:
        if handle is None or not handle.active:
            return
        handle.active = False
        self._handles.discard(handle)
        if handle._timer_id is not None:
            self._host.after_cancel(handle._timer_id)
            handle._timer_id = None

    def _arm(self, handle: PollingHandle) -> None:
        handle._timer_id = self._host.after(handle.interval_ms, lambda: self._fire(handle))

    def _fire(self, handle: PollingHandle) -> None:
        # A firing that was already queued when stop() ran is dropped here
        if not handle.active:
            return
        self._arm(handle)
        handle.on_tick()
