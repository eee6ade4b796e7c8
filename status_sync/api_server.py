"""Lightweight local HTTP API for UI clients: status, config, and the sync toggle."""

import threading
from typing import Optional

from flask import Flask, jsonify, request

from .app import StatusSyncApp
from .config import API_PORT

_app_instance: Optional[Flask] = None
_server_thread: Optional[threading.Thread] = None


def create_app(status_app: StatusSyncApp) -> Flask:
    app = Flask("status_sync_api")

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    # Basic CORS for local UI clients
    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.get("/status")
    def status():
        return jsonify(status_app.status())

    @app.route("/config", methods=["GET", "POST", "OPTIONS"])
    def config():
        if request.method == "OPTIONS":
            return ("", 204)
        if request.method == "GET":
            current = status_app.config_store.config
            # The key is a credential; only report whether it is set
            return jsonify({
                "endpoint": current.endpoint,
                "has_auth_key": bool(current.auth_key),
                "configured": current.is_configured,
            })

        data = request.get_json(silent=True) or {}
        endpoint = str(data.get("endpoint", "") or "").strip()
        auth_key = str(data.get("auth_key", "") or "").strip()
        if not endpoint or not auth_key:
            return jsonify({"status": "error", "message": "endpoint and auth_key are required"}), 400
        updated = status_app.config_store.update(endpoint, auth_key)
        return jsonify({"status": "ok", "configured": updated.is_configured})

    @app.route("/sync", methods=["POST", "OPTIONS"])
    def sync():
        if request.method == "OPTIONS":
            return ("", 204)
        data = request.get_json(silent=True) or {}
        enabled = data.get("enabled")
        if not isinstance(enabled, bool):
            return jsonify({"status": "error", "message": "enabled must be true or false"}), 400
        status_app.set_sync_enabled(enabled)
        return jsonify({"status": "ok", "enabled": enabled})

    return app


def start_api_server(status_app: StatusSyncApp, port: Optional[int] = None) -> None:
    """
    Start the local API server in a background thread.
    Only binds to 127.0.0.1.
    """
    global _app_instance, _server_thread
    if _server_thread and _server_thread.is_alive():
        return
    _app_instance = create_app(status_app)
    port = port or API_PORT

    def run():
        _app_instance.run(host="127.0.0.1", port=port, debug=False, use_reloader=False)

    _server_thread = threading.Thread(target=run, name="status-sync-api", daemon=True)
    _server_thread.start()
