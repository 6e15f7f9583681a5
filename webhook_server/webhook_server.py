from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, current_app, request
from flask.json import jsonify

logger = logging.getLogger(__name__)

MAX_EVENTS = 500

# Load .env from EXE directory (so it stays editable in production)
EXE_DIR = Path(sys.executable).resolve().parent if getattr(sys, "frozen", False) else Path(__file__).resolve().parent
load_dotenv(EXE_DIR / ".env")


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def require_bearer(fn):
    """Endpoints that need `Authorization: Bearer <WEBHOOK_TOKEN>`."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        auth = request.headers.get("Authorization", "")
        if auth.startswith("Bearer "):
            token = auth.removeprefix("Bearer ").strip()
            if token == current_app.config["WEBHOOK_TOKEN"]:
                return fn(*args, **kwargs)
            return jsonify({"error": "invalid token"}), 403

        return jsonify({"error": "unauthorized"}), 401
    return wrapper


def create_app(token: Optional[str] = None) -> Flask:
    """
    Development receiver for escalation webhooks.

    Parameters
    ----------
    token
        Expected bearer token; defaults to the ``WEBHOOK_TOKEN`` environment
        variable (or ``dev-token``).
    """
    app = Flask(__name__)
    app.config["WEBHOOK_TOKEN"] = token if token is not None else os.getenv("WEBHOOK_TOKEN", "dev-token")
    events: list[dict] = []

    @app.post("/escalation")
    @require_bearer
    def escalation():
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or data.get("type") != "escalation":
            return jsonify({"error": "expected an escalation payload"}), 400

        events.append({"received_at": _now_iso(), "body": data})
        if len(events) > MAX_EVENTS:
            del events[:-MAX_EVENTS]

        logger.warning(
            "escalation received for %s (%s) -> %s",
            data.get("subject"),
            data.get("severity"),
            data.get("destination"),
        )
        return jsonify({"status": "ok"}), 200

    @app.get("/api/escalation/recent")
    @require_bearer
    def api_recent():
        recent = list(reversed(events[-200:]))
        return jsonify({"count": len(events), "events": recent}), 200

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    # IMPORTANT for EXE: do NOT use debug=True in production
    create_app().run(host="0.0.0.0", port=8000, debug=False)
