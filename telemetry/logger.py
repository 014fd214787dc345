# telemetry/logger.py
from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import settings


def _conn() -> sqlite3.Connection:
    c = sqlite3.connect(settings.TELEMETRY_DB_PATH)
    c.execute(
        """
        CREATE TABLE IF NOT EXISTS wizard_events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            ts TEXT NOT NULL,
            user_id TEXT,
            event TEXT NOT NULL,
            payload TEXT NOT NULL
        )
        """
    )
    c.commit()
    return c


def log_event(event: str, payload: Dict[str, Any], user_id: Optional[str] = None) -> None:
    """
    Telemetry must NEVER break the wizard.
    Payload carries step numbers and outcome kinds, never form values.
    """
    if not settings.TELEMETRY_ENABLED:
        return
    try:
        ts = datetime.now(timezone.utc).isoformat()
        with _conn() as c:
            c.execute(
                "INSERT INTO wizard_events (ts, user_id, event, payload) VALUES (?, ?, ?, ?)",
                (ts, user_id, event, json.dumps(payload, ensure_ascii=False)),
            )
            c.commit()
    except Exception:
        pass


def recent_events(limit: int = 50) -> list[Dict[str, Any]]:
    with _conn() as c:
        rows = c.execute(
            "SELECT ts, user_id, event, payload FROM wizard_events ORDER BY id DESC LIMIT ?",
            (int(limit),),
        ).fetchall()
    return [
        {"ts": ts, "user_id": uid, "event": event, "payload": json.loads(payload)}
        for ts, uid, event, payload in rows
    ]
