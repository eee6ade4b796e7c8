"""Status synchronization: config, transport, and the debounce engine."""

from .config_store import ConfigStore, SyncConfig
from .transport import StatusTransport, TransportResult
from .engine import EmissionKind, PendingEmission, StatusSyncEngine, format_tab_status

__all__ = [
    'ConfigStore',
    'SyncConfig',
    'StatusTransport',
    'TransportResult',
    'EmissionKind',
    'PendingEmission',
    'StatusSyncEngine',
    'format_tab_status',
]
