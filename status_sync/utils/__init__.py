"""Utility modules for status sync."""

from .applescript import AppleScriptExecutor
from .dispatch import SerialDispatcher

__all__ = ["AppleScriptExecutor", "SerialDispatcher"]
