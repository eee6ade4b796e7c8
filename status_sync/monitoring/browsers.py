"""Supported browsers and the tab snapshot model."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Field separator in script output; titles and URLs may contain commas
FIELD_DELIMITER = "|||"

_SAFARI_SCRIPT = '''
tell application "Safari"
    if frontmost then
        tell front window
            try
                set tabTitle to name of current tab
                set tabURL to URL of current tab
                set tabIndex to index of current tab
                return tabTitle & "|||" & tabURL & "|||" & (tabIndex as text)
            on error
                return "|||" & "|||0"
            end try
        end tell
    else
        return "|||" & "|||0"
    end if
end tell
'''

_CHROME_SCRIPT = '''
tell application "Google Chrome"
    if frontmost then
        tell front window
            try
                set tabTitle to title of active tab
                set tabURL to URL of active tab
                set tabIndex to active tab index
                return tabTitle & "|||" & tabURL & "|||" & (tabIndex as text)
            on error
                return "|||" & "|||0"
            end try
        end tell
    else
        return "|||" & "|||0"
    end if
end tell
'''

# Edge has no reliable active tab index; a found active tab reports 1
_EDGE_SCRIPT = '''
tell application "Microsoft Edge"
    if frontmost then
        try
            if (count of windows) > 0 then
                tell first window
                    if (count of tabs) > 0 then
                        set activeTab to active tab
                        set tabTitle to title of activeTab
                        set tabURL to URL of activeTab
                        return tabTitle & "|||" & tabURL & "|||1"
                    end if
                end tell
            end if
        on error
            return "|||" & "|||0"
        end try
    end if
    return "|||" & "|||0"
end tell
'''


class BrowserKind(Enum):
    """Browsers whose active tab can be inspected."""

    SAFARI = ("Safari", "com.apple.Safari", _SAFARI_SCRIPT)
    CHROME = ("Google Chrome", "com.google.Chrome", _CHROME_SCRIPT)
    EDGE = ("Microsoft Edge", "com.microsoft.edgemac", _EDGE_SCRIPT)

    def __init__(self, display_name: str, bundle_identifier: str, script: str):
        self.display_name = display_name
        self.bundle_identifier = bundle_identifier
        self.script = script

    @classmethod
    def from_identity(cls, identity: Optional[str]) -> Optional["BrowserKind"]:
        """
        Classify a frontmost process identity.

        Args:
            identity: Bundle identifier of the frontmost process

        Returns:
            The matching browser, or None for anything that is not an exact match
        """
        if not identity:
            return None
        for kind in cls:
            if kind.bundle_identifier == identity:
                return kind
        return None


@dataclass(frozen=True)
class TabSnapshot:
    """Point-in-time record of the active tab of a browser."""

    title: str
    url: str
    browser_kind: BrowserKind
    tab_index: int

    @property
    def is_valid(self) -> bool:
        return bool(self.title) and bool(self.url) and self.tab_index > 0
