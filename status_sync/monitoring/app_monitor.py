"""Frontmost application detection using AppleScript."""

import threading
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import APP_INTERVAL
from ..utils import AppleScriptExecutor
from .browsers import FIELD_DELIMITER

# Create a module-level executor instance
_executor = AppleScriptExecutor()

_FRONTMOST_SCRIPT = '''
tell application "System Events"
    set frontProc to first application process whose frontmost is true
    set procName to name of frontProc
    set bundleId to ""
    try
        set bundleId to bundle identifier of frontProc
    end try
    set appPath to ""
    try
        set appPath to POSIX path of (application file of frontProc as alias)
    end try
    return bundleId & "|||" & procName & "|||" & appPath
end tell
'''


@dataclass(frozen=True)
class FrontmostApplication:
    """The application currently receiving user input."""

    identity: Optional[str]
    display_name: str
    icon_ref: Optional[str] = None


def parse_frontmost_output(output: Optional[str]) -> Optional[FrontmostApplication]:
    """
    Parse the bundleId|||name|||path output of the frontmost script.

    Returns:
        FrontmostApplication, or None if nothing usable was returned
    """
    if not output:
        return None
    parts = output.split(FIELD_DELIMITER)
    if len(parts) != 3:
        return None
    identity, name, path = (part.strip() for part in parts)
    if not identity and not name:
        return None
    return FrontmostApplication(
        identity=identity or None,
        display_name=name or identity,
        icon_ref=path or None
    )


def get_frontmost_application(executor: Optional[AppleScriptExecutor] = None) -> Optional[FrontmostApplication]:
    """
    Get the current frontmost application via AppleScript.

    Returns:
        FrontmostApplication, or None if the query fails
    """
    success, stdout, _ = (executor or _executor).execute(_FRONTMOST_SCRIPT)
    if not success:
        return None
    return parse_frontmost_output(stdout)


class FrontmostAppObserver:
    """Polls the frontmost application and reports every change."""

    def __init__(
        self,
        on_change: Callable[[FrontmostApplication], None],
        interval: Optional[float] = None,
        provider: Callable[[], Optional[FrontmostApplication]] = get_frontmost_application
    ):
        """
        Initialize the observer.

        Args:
            on_change: Called with the new application on start and on each change
            interval: Seconds between polls (defaults to config value)
            provider: Frontmost application query
        """
        self.on_change = on_change
        self.interval = interval or APP_INTERVAL
        self._provider = provider
        self._previous: Optional[FrontmostApplication] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        """Report the current application, then keep polling in a background thread."""
        if self._running:
            return

        self._running = True
        self._stop_event.clear()
        self.check()
        self._thread = threading.Thread(target=self._monitor_loop, name="status-sync-frontmost", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop polling gracefully."""
        self._running = False
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2.0)
        self._thread = None

    def check(self) -> bool:
        """
        Poll once.

        Returns:
            True if a change was reported
        """
        current = self._provider()
        if current is None:
            return False
        previous = self._previous
        if previous is not None and (previous.identity, previous.display_name) == (current.identity, current.display_name):
            return False
        self._previous = current
        self.on_change(current)
        return True

    def _monitor_loop(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.check()
            except Exception as e:
                # Continue monitoring even if one check fails
                print(f"Warning: Frontmost app check failed: {e}")
