"""Frontmost application and browser tab monitoring."""

from .browsers import BrowserKind, TabSnapshot
from .app_monitor import FrontmostApplication, FrontmostAppObserver, get_frontmost_application
from .tab_inspector import TabInspector
from .scheduler import PollScheduler
from .tab_monitor import BrowserTabMonitor, MonitorState

__all__ = [
    'BrowserKind',
    'TabSnapshot',
    'FrontmostApplication',
    'FrontmostAppObserver',
    'get_frontmost_application',
    'TabInspector',
    'PollScheduler',
    'BrowserTabMonitor',
    'MonitorState',
]
