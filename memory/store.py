# memory/store.py
from __future__ import annotations

from typing import Dict, Optional

from core.wizard_controller import ProfileCompletionController

# -------------------------------------------------------------------
# Wizard sessions: session_key -> controller (in-process, not persisted)
# -------------------------------------------------------------------
SESSIONS: Dict[str, ProfileCompletionController] = {}


def get_session(key: str) -> Optional[ProfileCompletionController]:
    return SESSIONS.get(str(key))


def put_session(key: str, controller: ProfileCompletionController) -> None:
    SESSIONS[str(key)] = controller


def drop_session(key: str) -> None:
    SESSIONS.pop(str(key), None)


def clear_sessions() -> None:
    SESSIONS.clear()
