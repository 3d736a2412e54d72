"""Debounced delayed calls on top of a tkinter-style scheduler.

Any object exposing ``after(ms, func) -> id`` and ``after_cancel(id)`` works
as a scheduler; a tkinter root or widget is the usual one. Scheduling keeps
everything on the main loop thread, so the action can mutate engine state.

Usage:
    debouncer = Debouncer(tk_root, delay_ms=300)
    debouncer.schedule(lambda: store.set_search_term(text))
    # ... a newer keystroke cancels the pending call and reschedules
    debouncer.schedule(lambda: store.set_search_term(newer_text))
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from .debug_trace import logger


class Scheduler(Protocol):
    def after(self, ms: int, func: Callable[[], None]) -> Any: ...

    def after_cancel(self, id: Any) -> None: ...


class PendingCall:
    """Cancellation handle for one scheduled action."""

    def __init__(self, scheduler: Scheduler, action: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._action = action
        self._after_id: Any = None
        self._active = False

    @property
    def active(self) -> bool:
        """True until the action has fired or been cancelled."""
        return self._active

    def start(self, delay_ms: int) -> None:
        self._active = True
        self._after_id = self._scheduler.after(delay_ms, self._fire)

    def cancel(self) -> None:
        """Cancel the action if it has not fired yet."""
        if not self._active:
            return
        self._active = False
        if self._after_id is not None:
            self._scheduler.after_cancel(self._after_id)
        self._after_id = None

    def _fire(self) -> None:
        if not self._active:
            return
        self._active = False
        self._after_id = None
        self._action()


class Debouncer:
    """Collapses rapid calls into a single delayed action.

    At most one call is pending: scheduling again cancels the prior
    handle before arming a new one.
    """

    def __init__(self, scheduler: Scheduler, delay_ms: int) -> None:
        self._scheduler = scheduler
        self._delay_ms = delay_ms
        self._pending: PendingCall | None = None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def is_pending(self) -> bool:
        return self._pending is not None and self._pending.active

    def schedule(self, action: Callable[[], None], delay_ms: int | None = None) -> PendingCall:
        """Schedule action after the delay, cancelling any pending one.

        Args:
            action: Zero-argument callable to run.
            delay_ms: Override for this call (defaults to the debouncer's delay).

        Returns:
            The cancellation handle for the new call.
        """
        if self.is_pending:
            logger.debug("Debounce: superseding pending call")
        self.cancel()

        handle = PendingCall(self._scheduler, action)
        handle.start(self._delay_ms if delay_ms is None else delay_ms)
        self._pending = handle
        return handle

    def cancel(self) -> None:
        """Cancel the pending call, if any."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
