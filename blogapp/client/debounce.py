from __future__ import annotations

import threading
from typing import Any, Callable


class Debouncer:
    """Single-shot delayed call that restarts on every ``call()``.

    A burst of calls closer together than ``delay`` seconds results in one
    invocation of ``callback`` with the arguments of the last call.
    ``cancel()`` drops a pending invocation.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[..., Any],
        timer_factory: Callable[..., Any] = threading.Timer,
    ) -> None:
        self.delay = delay
        self._callback = callback
        self._timer_factory = timer_factory
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def call(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self._timer_factory(self.delay, self._fire, args=(self._generation, args, kwargs))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1

    def _fire(self, generation: int, args: tuple, kwargs: dict) -> None:
        with self._lock:
            # Superseded or cancelled after the timer thread already woke up
            if generation != self._generation:
                return
            self._timer = None
        self._callback(*args, **kwargs)
