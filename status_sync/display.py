"""Display state for the status menu: app name, tab title, tooltip."""

import threading
from dataclasses import dataclass
from typing import Optional

from .config import TITLE_LIMIT
from .monitoring import FrontmostApplication, TabSnapshot

ELLIPSIS = "…"
UNKNOWN_APP = "Unknown app"


def truncate_title(title: str, limit: Optional[int] = None) -> str:
    """
    Shorten a tab title for the menu.

    Args:
        title: Full tab title
        limit: Maximum characters kept before the ellipsis (defaults to config value)

    Returns:
        The title, or its first limit characters followed by an ellipsis
    """
    limit = limit or TITLE_LIMIT
    if len(title) <= limit:
        return title
    return title[:limit] + ELLIPSIS


@dataclass(frozen=True)
class DisplayState:
    app_name: str = UNKNOWN_APP
    icon_ref: Optional[str] = None
    tab_title: Optional[str] = None
    tab_tooltip: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "app_name": self.app_name,
            "icon_ref": self.icon_ref,
            "tab_title": self.tab_title,
            "tab_tooltip": self.tab_tooltip,
        }


class StatusDisplay:
    """Keeps the current display state; updated from the display thread."""

    def __init__(self, title_limit: Optional[int] = None):
        self.title_limit = title_limit or TITLE_LIMIT
        self._state = DisplayState()
        self._lock = threading.Lock()

    def snapshot(self) -> DisplayState:
        with self._lock:
            return self._state

    def show_application(self, app: FrontmostApplication) -> None:
        with self._lock:
            self._state = DisplayState(
                app_name=app.display_name or UNKNOWN_APP,
                icon_ref=app.icon_ref,
                tab_title=self._state.tab_title,
                tab_tooltip=self._state.tab_tooltip
            )

    def show_tab(self, snapshot: Optional[TabSnapshot]) -> None:
        with self._lock:
            if snapshot is None or not snapshot.is_valid:
                title, tooltip = None, None
            else:
                title, tooltip = truncate_title(snapshot.title, self.title_limit), snapshot.url
            self._state = DisplayState(
                app_name=self._state.app_name,
                icon_ref=self._state.icon_ref,
                tab_title=title,
                tab_tooltip=tooltip
            )
