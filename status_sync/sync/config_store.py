"""Sync endpoint configuration and its JSON-backed store."""

import json
import os
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..config import AUTH_KEY, CONFIG_PATH, ENDPOINT


@dataclass(frozen=True)
class SyncConfig:
    """Where status updates go and the key that authorizes them."""

    endpoint: Optional[str] = None
    auth_key: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool((self.endpoint or "").strip()) and bool((self.auth_key or "").strip())


class ConfigStore:
    """Holds the current SyncConfig, persists it, and notifies on change."""

    def __init__(self, path: Optional[str] = None, default: Optional[SyncConfig] = None):
        """
        Initialize the store and load any saved configuration.

        Args:
            path: JSON file to persist to (defaults to config value)
            default: Used when nothing is saved yet (defaults to environment seeds)
        """
        self.path = path or CONFIG_PATH
        self._lock = threading.Lock()
        self._subscribers: List[Callable[[SyncConfig], None]] = []
        self._config = self._load() or default or SyncConfig(endpoint=ENDPOINT, auth_key=AUTH_KEY)

    @property
    def config(self) -> SyncConfig:
        with self._lock:
            return self._config

    def subscribe(self, callback: Callable[[SyncConfig], None]) -> None:
        """Register a callback for configuration changes."""
        with self._lock:
            self._subscribers.append(callback)

    def update(self, endpoint: Optional[str], auth_key: Optional[str]) -> SyncConfig:
        """
        Replace the configuration, save it, and notify subscribers.

        Returns:
            The stored SyncConfig
        """
        new_config = SyncConfig(
            endpoint=(endpoint or "").strip() or None,
            auth_key=(auth_key or "").strip() or None
        )
        with self._lock:
            changed = new_config != self._config
            self._config = new_config
            subscribers = list(self._subscribers)

        self._save(new_config)
        if changed:
            for callback in subscribers:
                try:
                    callback(new_config)
                except Exception as e:
                    print(f"Warning: Config subscriber failed: {e}")
        return new_config

    def _load(self) -> Optional[SyncConfig]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Warning: Could not read config from {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return SyncConfig(endpoint=data.get("endpoint") or None, auth_key=data.get("auth_key") or None)

    def _save(self, config: SyncConfig) -> None:
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"endpoint": config.endpoint, "auth_key": config.auth_key}, f, indent=2)
        except OSError as e:
            print(f"Warning: Could not save config to {self.path}: {e}")
