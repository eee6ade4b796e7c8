"""Main entry point for status sync."""

import time

from .api_server import start_api_server
from .app import StatusSyncApp
from .config import API_PORT, DEBOUNCE_DELAY, POLL_INTERVAL


def print_banner(status_app: StatusSyncApp) -> None:
    """Print welcome message and current settings."""
    config = status_app.config_store.config
    print("=" * 60)
    print("Status Sync")
    print("=" * 60)
    print(f"\nPolling browser tabs every {POLL_INTERVAL:g}s, sending after {DEBOUNCE_DELAY:g}s of quiet")
    print(f"Endpoint: {config.endpoint or '(not configured)'}")
    print(f"Sync: {'enabled' if status_app.sync_enabled else 'disabled'}")
    print(f"Local API: http://127.0.0.1:{API_PORT}")
    print("=" * 60)
    if not config.is_configured:
        print(f"\n⚠️  Set the endpoint and key with POST http://127.0.0.1:{API_PORT}/config\n")


def main():
    """Run until interrupted."""
    status_app = StatusSyncApp()
    print_banner(status_app)

    with status_app:
        start_api_server(status_app)
        print("👀 Watching the frontmost app... (Ctrl+C to quit)\n")
        try:
            while True:
                time.sleep(0.5)
        except KeyboardInterrupt:
            print("\n\nInterrupted. Goodbye!")


if __name__ == "__main__":
    main()
