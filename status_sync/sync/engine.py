"""Debounced status synchronization."""

import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..config import DEBOUNCE_DELAY
from ..exceptions import ConfigurationError
from ..monitoring.browsers import TabSnapshot
from .config_store import SyncConfig
from .transport import StatusTransport, TransportResult


class EmissionKind(Enum):
    TAB = "tab"
    APP_NAME = "app_name"


@dataclass(frozen=True)
class PendingEmission:
    """The one status update waiting for its quiet period to end."""

    kind: EmissionKind
    payload_text: str
    scheduled_at: float
    generation: int


def format_tab_status(snapshot: TabSnapshot) -> str:
    """Short "<browser>: <title>" form; the remote display is narrow."""
    return f"{snapshot.browser_kind.display_name}: {snapshot.title}"


class StatusSyncEngine:
    """
    Turns a stream of tab and app changes into at most one update per quiet period.

    Every notify_* call cancels the pending emission and schedules a new one
    debounce_delay seconds ahead, so only the last call of a burst is sent.
    When the timer fires the update is dropped if the sync config is
    incomplete or the text equals the last acknowledged status; otherwise it
    is handed to the transport on a worker thread. Failures are reported and
    not retried; the next real status change tries again.

    The engine does not know whether sync is enabled. Callers only notify
    while it is, and call reset_last_sent() when it gets disabled or the
    config becomes invalid.
    """

    def __init__(
        self,
        config_provider: Callable[[], SyncConfig],
        transport: Optional[StatusTransport] = None,
        debounce_delay: Optional[float] = None,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
        executor: Optional[Executor] = None,
        clock: Callable[[], float] = time.monotonic,
        on_result: Optional[Callable[[str, TransportResult], None]] = None
    ):
        """
        Initialize the engine.

        Args:
            config_provider: Returns the current SyncConfig; read, never mutated
            transport: Sends updates (defaults to StatusTransport())
            debounce_delay: Quiet period in seconds (defaults to config value)
            timer_factory: Builds the debounce timer, threading.Timer compatible
            executor: Runs transport calls (defaults to a single worker thread)
            clock: Monotonic time source for scheduled_at
            on_result: Called with (payload, result) after each transport call
        """
        self._config_provider = config_provider
        self._transport = transport or StatusTransport()
        self.debounce_delay = debounce_delay or DEBOUNCE_DELAY
        self._timer_factory = timer_factory
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="status-sync-send")
        self._clock = clock
        self.on_result = on_result

        self._lock = threading.Lock()
        self._generation = 0
        self._pending: Optional[PendingEmission] = None
        self._timer: Optional[threading.Timer] = None
        self._last_sent: Optional[str] = None
        self._app_name: Optional[str] = None

    @property
    def pending(self) -> Optional[PendingEmission]:
        with self._lock:
            return self._pending

    @property
    def last_sent_status(self) -> Optional[str]:
        with self._lock:
            return self._last_sent

    def notify_tab_info(self, snapshot: Optional[TabSnapshot]) -> None:
        """
        Report a tab change.

        A missing or invalid snapshot falls back to the last reported app
        name; with no app name known, the pending emission is dropped.
        """
        if snapshot is not None and snapshot.is_valid:
            self._schedule(EmissionKind.TAB, format_tab_status(snapshot))
            return

        with self._lock:
            app_name = self._app_name
        if app_name:
            self._schedule(EmissionKind.APP_NAME, app_name)
        else:
            self.cancel_pending()

    def notify_app_name(self, name: str) -> None:
        """Report the frontmost application name."""
        self.set_app_name(name)
        self._schedule(EmissionKind.APP_NAME, name)

    def set_app_name(self, name: str) -> None:
        """Record the app name used when no tab is available, without scheduling."""
        with self._lock:
            self._app_name = name

    def reset_last_sent(self) -> None:
        """Forget the last acknowledged status so the next one is always sent."""
        with self._lock:
            self._last_sent = None

    def cancel_pending(self) -> None:
        with self._lock:
            self._cancel_locked()

    def shutdown(self) -> None:
        """Drop the pending emission; in-flight sends are left to finish."""
        self.cancel_pending()
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _cancel_locked(self) -> None:
        # Bumping the generation invalidates a timer that is already firing
        self._generation += 1
        self._pending = None
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self, kind: EmissionKind, payload_text: str) -> None:
        with self._lock:
            self._cancel_locked()
            generation = self._generation
            self._pending = PendingEmission(
                kind=kind,
                payload_text=payload_text,
                scheduled_at=self._clock() + self.debounce_delay,
                generation=generation
            )
            timer = self._timer_factory(self.debounce_delay, self._fire, args=(generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is None:
                return
            pending = self._pending
            self._pending = None
            self._timer = None

        config = self._config_provider()
        if not config.is_configured:
            return

        with self._lock:
            if pending.payload_text == self._last_sent:
                return

        try:
            self._executor.submit(self._send, config, pending.payload_text)
        except RuntimeError as e:
            # Executor shut down
            print(f"Warning: Status update not sent: {e}")

    def _send(self, config: SyncConfig, payload_text: str) -> None:
        try:
            result = self._transport.update_status(config.endpoint, config.auth_key, payload_text)
        except ConfigurationError as e:
            print(f"Warning: Status sync is misconfigured: {e}")
            return

        if result.success:
            with self._lock:
                self._last_sent = payload_text
            print(f"Status updated ({result.status_code}): {payload_text}")
        else:
            print(f"Warning: Status update failed: {result.error}")

        if self.on_result:
            self.on_result(payload_text, result)
