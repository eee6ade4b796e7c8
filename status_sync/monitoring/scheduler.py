"""Fixed-cadence poll scheduler with out-of-band triggers."""

import threading
import time
from typing import Callable, Optional

from ..config import POLL_INTERVAL, POLL_TOLERANCE


class PollScheduler:
    """
    Calls a tick callback once per interval on a background thread.

    trigger() runs an extra, forced tick right away. A scheduled tick that
    falls due within the tolerance window after a forced tick is folded into
    it, so a burst of triggers does not double the polling rate.
    """

    def __init__(
        self,
        callback: Callable[..., None],
        interval: Optional[float] = None,
        tolerance: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the scheduler.

        Args:
            callback: Called as callback(force=bool) on every tick
            interval: Seconds between scheduled ticks (defaults to config value)
            tolerance: Coalescing window in seconds (defaults to config value)
            clock: Monotonic time source
        """
        self.callback = callback
        self.interval = interval or POLL_INTERVAL
        self.tolerance = POLL_TOLERANCE if tolerance is None else tolerance
        self._clock = clock
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._wake = threading.Event()

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start ticking in a background thread."""
        if self._running:
            return

        self._running = True
        self._wake.clear()
        self._thread = threading.Thread(target=self._run, name="status-sync-poll", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop ticking; safe to call when already stopped."""
        if not self._running:
            return
        self._running = False
        self._wake.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=2.0)
        self._thread = None

    def trigger(self) -> None:
        """Request an immediate forced tick."""
        if self._running:
            self._wake.set()

    def _run(self) -> None:
        next_tick = self._clock() + self.interval
        while self._running:
            triggered = self._wake.wait(max(0.0, next_tick - self._clock()))
            if not self._running:
                break

            if triggered:
                self._wake.clear()
                self._fire(force=True)
                now = self._clock()
                if next_tick - now <= self.tolerance:
                    next_tick = now + self.interval
                continue

            self._fire(force=False)
            next_tick += self.interval
            now = self._clock()
            if next_tick <= now:
                # Slow tick; skip the missed ones instead of bursting
                next_tick = now + self.interval

    def _fire(self, force: bool) -> None:
        try:
            self.callback(force=force)
        except Exception as e:
            # Keep polling even if one tick fails
            print(f"Warning: Poll tick failed: {e}")
