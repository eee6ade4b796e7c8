"""Application wiring: frontmost app and tab changes to display and sync."""

import threading
from typing import Any, Dict, Optional

from .config import SYNC_ENABLED
from .display import StatusDisplay
from .monitoring import BrowserTabMonitor, FrontmostApplication, FrontmostAppObserver, TabSnapshot
from .sync import ConfigStore, StatusSyncEngine, SyncConfig
from .utils import SerialDispatcher


class StatusSyncApp:
    """
    Owns the monitors, the sync engine, and the display state.

    All change handling runs on the dispatcher thread. Sync is only notified
    while enabled; turning it off, or losing a usable config, clears the
    engine's last acknowledged status.
    """

    def __init__(
        self,
        config_store: Optional[ConfigStore] = None,
        engine: Optional[StatusSyncEngine] = None,
        monitor: Optional[BrowserTabMonitor] = None,
        observer: Optional[FrontmostAppObserver] = None,
        display: Optional[StatusDisplay] = None,
        dispatcher: Optional[SerialDispatcher] = None,
        sync_enabled: Optional[bool] = None
    ):
        self.config_store = config_store or ConfigStore()
        self.display = display or StatusDisplay()
        self.dispatcher = dispatcher or SerialDispatcher()
        self.engine = engine or StatusSyncEngine(lambda: self.config_store.config)
        self.monitor = monitor or BrowserTabMonitor(dispatch=self.dispatcher.dispatch)
        self.monitor.on_tab_changed = self.handle_tab_changed
        self.observer = observer or FrontmostAppObserver(on_change=self._on_frontmost_changed)

        self._sync_enabled = SYNC_ENABLED if sync_enabled is None else sync_enabled
        self._current_app: Optional[FrontmostApplication] = None
        self._current_tab: Optional[TabSnapshot] = None
        self._lock = threading.Lock()

        self.config_store.subscribe(self._on_config_changed)

    def __enter__(self) -> "StatusSyncApp":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    @property
    def sync_enabled(self) -> bool:
        with self._lock:
            return self._sync_enabled

    def start(self) -> None:
        self.dispatcher.start()
        self.monitor.start()
        self.observer.start()

    def stop(self) -> None:
        self.monitor.stop()
        self.observer.stop()
        self.engine.shutdown()
        self.dispatcher.stop()

    def set_sync_enabled(self, enabled: bool) -> None:
        """Turn synchronization on or off."""
        self.dispatcher.dispatch(self._apply_sync_enabled, enabled)

    def handle_app_changed(self, app: FrontmostApplication) -> None:
        with self._lock:
            self._current_app = app
            tab = self._current_tab
            enabled = self._sync_enabled
        self.display.show_application(app)
        if enabled:
            self._notify_engine(app, tab)

    def handle_tab_changed(self, snapshot: Optional[TabSnapshot]) -> None:
        with self._lock:
            self._current_tab = snapshot
            enabled = self._sync_enabled
        self.display.show_tab(snapshot)
        if enabled:
            self.engine.notify_tab_info(snapshot)

    def status(self) -> Dict[str, Any]:
        """Display and sync state for external UI clients."""
        pending = self.engine.pending
        return {
            "display": self.display.snapshot().to_dict(),
            "sync_enabled": self.sync_enabled,
            "configured": self.config_store.config.is_configured,
            "last_sent_status": self.engine.last_sent_status,
            "pending_status": pending.payload_text if pending else None,
        }

    def _on_frontmost_changed(self, app: FrontmostApplication) -> None:
        # Called on the observer thread
        self.dispatcher.dispatch(self.handle_app_changed, app)
        self.monitor.notify_frontmost_changed()

    def _on_config_changed(self, config: SyncConfig) -> None:
        self.dispatcher.dispatch(self._apply_config, config)

    def _apply_sync_enabled(self, enabled: bool) -> None:
        with self._lock:
            was_enabled = self._sync_enabled
            self._sync_enabled = enabled
        if enabled == was_enabled:
            return
        if enabled:
            print("Status sync enabled")
            self._report_current()
        else:
            print("Status sync disabled")
            self.engine.cancel_pending()
            self.engine.reset_last_sent()

    def _apply_config(self, config: SyncConfig) -> None:
        # A new endpoint has not seen the current status yet
        self.engine.reset_last_sent()
        if not config.is_configured:
            print("Warning: Status sync is not configured; updates are paused")
            self.engine.cancel_pending()
            return
        if self.sync_enabled:
            self._report_current()

    def _report_current(self) -> None:
        with self._lock:
            app = self._current_app
            tab = self._current_tab
        self._notify_engine(app, tab)

    def _notify_engine(self, app: Optional[FrontmostApplication], tab: Optional[TabSnapshot]) -> None:
        # A tab shown for the frontmost browser outranks its app name, whichever arrived last
        if app is not None:
            self.engine.set_app_name(app.display_name)
        if tab is not None and tab.is_valid and (app is None or tab.browser_kind.bundle_identifier == app.identity):
            self.engine.notify_tab_info(tab)
        elif app is not None:
            self.engine.notify_app_name(app.display_name)
