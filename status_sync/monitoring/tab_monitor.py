"""Browser tab monitor: deduplicated view of the page the user is looking at."""

import dataclasses
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import MIN_CHECK_INTERVAL, POLL_INTERVAL, POLL_TOLERANCE
from ..exceptions import InspectionError
from ..utils import SerialDispatcher
from .app_monitor import FrontmostApplication, get_frontmost_application
from .browsers import BrowserKind, TabSnapshot
from .scheduler import PollScheduler
from .tab_inspector import TabInspector


@dataclass
class MonitorState:
    """Mutable state owned by BrowserTabMonitor."""

    last_browser: Optional[BrowserKind] = None
    last_snapshot: Optional[TabSnapshot] = None
    last_identity: Optional[str] = None
    last_poll_time: Optional[float] = None


class BrowserTabMonitor:
    """
    Watches the frontmost browser's active tab and reports changes.

    Each poll tick classifies the frontmost process. For a recognized browser
    the active tab is inspected: synchronously right after a browser switch,
    on the worker executor otherwise. A tab change is reported through
    on_tab_changed only when the snapshot differs from the last one; leaving
    the browser (or failing to inspect it) reports None once.

    Ticks never overlap: a tick that arrives while an inspection from an
    earlier tick is still running is skipped. Callbacks are delivered through
    the dispatch function, which defaults to a private SerialDispatcher.
    """

    def __init__(
        self,
        on_tab_changed: Optional[Callable[[Optional[TabSnapshot]], None]] = None,
        inspector: Optional[TabInspector] = None,
        frontmost_provider: Callable[[], Optional[FrontmostApplication]] = get_frontmost_application,
        dispatch: Optional[Callable[..., None]] = None,
        executor: Optional[Executor] = None,
        clock: Callable[[], float] = time.monotonic,
        interval: Optional[float] = None,
        tolerance: Optional[float] = None,
        min_check_interval: Optional[float] = None
    ):
        self.on_tab_changed = on_tab_changed
        self.min_check_interval = min_check_interval or MIN_CHECK_INTERVAL
        self._inspector = inspector or TabInspector()
        self._frontmost_provider = frontmost_provider
        self._clock = clock

        self._dispatcher: Optional[SerialDispatcher] = None
        if dispatch is None:
            self._dispatcher = SerialDispatcher()
            dispatch = self._dispatcher.dispatch
        self._dispatch = dispatch

        self._owns_executor = executor is None
        self._executor = executor or self._new_executor()

        self._scheduler = PollScheduler(
            self.on_poll_tick,
            interval=interval or POLL_INTERVAL,
            tolerance=POLL_TOLERANCE if tolerance is None else tolerance,
            clock=clock
        )

        self._state = MonitorState()
        # Last value handed to the listener; the initial effective state is "no tab"
        self._last_emitted: Optional[TabSnapshot] = None
        self._inspection_pending = False
        self._lock = threading.Lock()
        self._tick_lock = threading.Lock()

    @staticmethod
    def _new_executor() -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="status-sync-inspect")

    def __enter__(self) -> "BrowserTabMonitor":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def state(self) -> MonitorState:
        """Copy of the current monitor state."""
        with self._lock:
            return dataclasses.replace(self._state)

    def start(self) -> None:
        """Start polling; calling it again while running does nothing."""
        if self._scheduler.running:
            return
        if self._dispatcher:
            self._dispatcher.start()
        if self._owns_executor and self._executor is None:
            self._executor = self._new_executor()
        self._scheduler.start()

    def stop(self) -> None:
        """Stop polling and release the timer and worker; safe when stopped."""
        self._scheduler.stop()
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        if self._dispatcher:
            self._dispatcher.stop()

    def notify_frontmost_changed(self) -> None:
        """Frontmost application changed; check right away instead of waiting a tick."""
        if self._scheduler.running:
            self._scheduler.trigger()
        else:
            self.on_poll_tick(force=True)

    def on_poll_tick(self, force: bool = False) -> None:
        """
        Run one check.

        Args:
            force: Skip the minimum check interval (used for frontmost changes)
        """
        if not self._tick_lock.acquire(blocking=False):
            return
        try:
            self._poll(force)
        finally:
            self._tick_lock.release()

    def _poll(self, force: bool) -> None:
        with self._lock:
            if self._inspection_pending:
                return
            last = self._state.last_poll_time
            if not force and last is not None and self._clock() - last < self.min_check_interval:
                return

        app = self._frontmost_provider()
        identity = app.identity if app else None
        with self._lock:
            app_switched = identity != self._state.last_identity
            self._state.last_identity = identity
        if app_switched:
            print(f"Switched to: {app.display_name if app else 'no frontmost app'}")

        kind = BrowserKind.from_identity(identity)
        if kind is None:
            self._clear()
            self._complete_check()
            return

        with self._lock:
            switched = kind != self._state.last_browser
            if switched:
                self._state.last_browser = kind
                self._state.last_snapshot = None

        if switched or self._executor is None:
            # New browser: inspect now so the display does not lag a tick
            self._apply(kind, self._inspect(kind))
            self._complete_check()
            return

        with self._lock:
            self._inspection_pending = True
        try:
            self._executor.submit(self._inspect_async, kind)
        except RuntimeError as e:
            # Executor already shut down
            print(f"Warning: Could not schedule tab inspection: {e}")
            with self._lock:
                self._inspection_pending = False

    def _inspect_async(self, kind: BrowserKind) -> None:
        try:
            self._apply(kind, self._inspect(kind))
        finally:
            with self._lock:
                self._inspection_pending = False
            self._complete_check()

    def _inspect(self, kind: BrowserKind) -> Optional[TabSnapshot]:
        try:
            return self._inspector.inspect(kind)
        except InspectionError:
            # Not frontmost, no window, or no active tab
            return None
        except Exception as e:
            print(f"Warning: Tab inspection error [{kind.display_name}]: {e}")
            return None

    def _apply(self, kind: BrowserKind, snapshot: Optional[TabSnapshot]) -> None:
        with self._lock:
            if self._state.last_browser != kind:
                # Browser changed while this inspection was running
                return
            if snapshot is None or not snapshot.is_valid:
                cleared = self._clear_locked()
            elif snapshot == self._state.last_snapshot:
                return
            else:
                self._state.last_snapshot = snapshot
                cleared = False

        if snapshot is not None and snapshot.is_valid:
            print(f"Tab: [{kind.display_name}] {snapshot.title}")
            self._emit(snapshot)
        elif cleared:
            self._emit(None)

    def _clear(self) -> None:
        with self._lock:
            cleared = self._clear_locked()
        if cleared:
            self._emit(None)

    def _clear_locked(self) -> bool:
        if self._state.last_browser is None and self._state.last_snapshot is None:
            return False
        self._state.last_browser = None
        self._state.last_snapshot = None
        return True

    def _complete_check(self) -> None:
        with self._lock:
            self._state.last_poll_time = self._clock()

    def _emit(self, snapshot: Optional[TabSnapshot]) -> None:
        with self._lock:
            if snapshot == self._last_emitted:
                return
            self._last_emitted = snapshot
        self._dispatch(self._deliver, snapshot)

    def _deliver(self, snapshot: Optional[TabSnapshot]) -> None:
        listener = self.on_tab_changed
        if listener:
            listener(snapshot)
