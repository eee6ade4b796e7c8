"""Active tab inspection for supported browsers using AppleScript."""

from typing import Optional

from ..exceptions import InspectionError
from ..utils import AppleScriptExecutor
from .browsers import FIELD_DELIMITER, BrowserKind, TabSnapshot


def parse_tab_output(output: Optional[str], kind: BrowserKind) -> TabSnapshot:
    """
    Parse the output of a tab inspection script.

    Args:
        output: Raw script output in title|||url|||index form
        kind: Browser the script was run against

    Returns:
        A valid TabSnapshot

    Raises:
        InspectionError: If the output is missing, malformed, or describes no tab
    """
    if not output:
        raise InspectionError(f"No output from {kind.display_name}")

    # Titles may contain the delimiter; the URL and index never do
    parts = output.rsplit(FIELD_DELIMITER, 2)
    if len(parts) != 3:
        raise InspectionError(f"Unexpected output from {kind.display_name}: {output!r}")

    title, url, index_text = (part.strip() for part in parts)
    try:
        tab_index = int(index_text)
    except ValueError:
        raise InspectionError(f"Invalid tab index from {kind.display_name}: {index_text!r}")

    snapshot = TabSnapshot(title=title, url=url, browser_kind=kind, tab_index=tab_index)
    if not snapshot.is_valid:
        # Browser not frontmost or no active tab
        raise InspectionError(f"No active tab in {kind.display_name}")
    return snapshot


class TabInspector:
    """Queries the active tab of a browser."""

    def __init__(self, executor: Optional[AppleScriptExecutor] = None):
        self._executor = executor or AppleScriptExecutor()

    def inspect(self, kind: BrowserKind) -> TabSnapshot:
        """
        Inspect the active tab of the given browser.

        Raises:
            InspectionError: On script failure or when there is no active tab
        """
        success, stdout, stderr = self._executor.execute(kind.script)
        if not success:
            raise InspectionError(f"AppleScript failed for {kind.display_name}: {stderr}")
        return parse_tab_output(stdout, kind)
