"""Reports the frontmost app and browser tab to a remote status endpoint."""

__version__ = "0.1.0"
