"""AppleScript execution utilities."""

import subprocess
from typing import Optional, Tuple

from ..config import SCRIPT_TIMEOUT


class AppleScriptExecutor:
    """Centralized AppleScript execution with standardized error handling."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Initialize the AppleScript executor.

        Args:
            timeout: Seconds to wait for osascript (defaults to config value)
        """
        self.timeout = timeout or SCRIPT_TIMEOUT

    def execute(self, script: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Execute an AppleScript command.

        Args:
            script: AppleScript code to execute

        Returns:
            Tuple of (success, stdout, stderr)
            - success: True if return code is 0, False otherwise
            - stdout: Standard output (None if empty)
            - stderr: Standard error (None if empty)
        """
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
                timeout=self.timeout
            )

            success = result.returncode == 0
            stdout = result.stdout.strip() if result.stdout.strip() else None
            stderr = result.stderr.strip() if result.stderr.strip() else None

            return success, stdout, stderr
        except subprocess.TimeoutExpired:
            return False, None, f"osascript timed out after {self.timeout}s"
        except OSError as e:
            # osascript missing (not macOS) or not executable
            return False, None, str(e)
