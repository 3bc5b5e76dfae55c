"""
api/session.py — per-user in-memory sessions (cookie based)

Each browser gets a UUID session id and its own state. A session expires
after SESSION_TTL seconds without access; its running exam, if any, is
abandoned so the deadline timer stops.
"""

import threading
import time
import uuid
from typing import Any

from api.config import SESSION_TTL

_lock = threading.Lock()
_sessions: dict[str, dict[str, Any]] = {}
_timestamps: dict[str, float] = {}


def _new_state() -> dict[str, Any]:
    return {
        "user_id": "",
        "runner": None,
    }


def _drop_runner(state: dict[str, Any]) -> None:
    runner = state.get("runner")
    if runner is not None:
        runner.abandon()


def create_session() -> str:
    """Create a new session and return its id."""
    sid = uuid.uuid4().hex
    with _lock:
        _sessions[sid] = _new_state()
        _timestamps[sid] = time.time()
    return sid


def get_session(sid: str) -> dict[str, Any] | None:
    """Session data by id, or None if missing or expired."""
    expired = None
    with _lock:
        if sid not in _sessions:
            return None
        if time.time() - _timestamps[sid] > SESSION_TTL:
            expired = _sessions.pop(sid)
            del _timestamps[sid]
        else:
            _timestamps[sid] = time.time()  # refresh on access
            return _sessions[sid]
    _drop_runner(expired)
    return None


def get(sid: str, key: str, default=None):
    """Read a value from the session."""
    session = get_session(sid)
    if session is None:
        return default
    return session.get(key, default)


def put(sid: str, key: str, value) -> None:
    """Write a value to the session."""
    with _lock:
        if sid in _sessions:
            _sessions[sid][key] = value
            _timestamps[sid] = time.time()


def reset(sid: str) -> None:
    """Clear the session, abandoning any running exam (user id is kept)."""
    with _lock:
        if sid not in _sessions:
            return
        old = _sessions[sid]
        _sessions[sid] = _new_state()
        _sessions[sid]["user_id"] = old.get("user_id", "")
        _timestamps[sid] = time.time()
    _drop_runner(old)


def cleanup_expired() -> int:
    """Remove expired sessions. Returns how many were removed."""
    now = time.time()
    with _lock:
        expired = [sid for sid, ts in _timestamps.items() if now - ts > SESSION_TTL]
        dropped = [_sessions.pop(sid) for sid in expired]
        for sid in expired:
            del _timestamps[sid]
    for state in dropped:
        _drop_runner(state)
    return len(dropped)
