"""Custom exception classes for status sync."""


class StatusSyncError(Exception):
    """Base exception for status sync errors."""
    pass


class InspectionError(StatusSyncError):
    """Exception raised when a browser tab cannot be inspected."""
    pass


class ConfigurationError(StatusSyncError):
    """Exception raised when the sync endpoint or key is missing or malformed."""
    pass
