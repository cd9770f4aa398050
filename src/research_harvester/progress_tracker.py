from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _ProgressState:
    run_id: str
    domain: str
    message: str
    done: bool = False
    success: bool = True
    findings: int = 0
    error: str = ""
    updated_at: datetime = field(default_factory=_utcnow)


_LOCK = Lock()
_STATES: dict[tuple[str, str], _ProgressState] = {}


def _key(run_id: str, domain: str) -> tuple[str, str]:
    return (str(run_id or "").strip(), str(domain or "").strip().upper() or "DEFAULT")


def _state_for(run_id: str, domain: str, message: str) -> _ProgressState:
    k = _key(run_id, domain)
    state = _STATES.get(k)
    if state is None:
        state = _ProgressState(run_id=k[0], domain=k[1], message=message)
        _STATES[k] = state
    return state


def start_progress(run_id: str, domain: str, message: str) -> None:
    with _LOCK:
        k = _key(run_id, domain)
        _STATES[k] = _ProgressState(
            run_id=k[0],
            domain=k[1],
            message=str(message or "").strip() or "Starting...",
        )


def update_progress(run_id: str, domain: str, message: str) -> None:
    with _LOCK:
        state = _state_for(run_id, domain, "Working...")
        state.message = str(message or "").strip() or state.message
        state.done = False
        state.updated_at = _utcnow()


def finish_progress(run_id: str, domain: str, findings: int, message: str = "Completed.") -> None:
    with _LOCK:
        state = _state_for(run_id, domain, "Completed.")
        state.message = str(message or "").strip() or "Completed."
        state.done = True
        state.success = True
        state.findings = int(findings)
        state.error = ""
        state.updated_at = _utcnow()


def fail_progress(run_id: str, domain: str, error: str) -> None:
    with _LOCK:
        state = _state_for(run_id, domain, "Failed.")
        state.message = "Failed."
        state.done = True
        state.success = False
        state.findings = 0
        state.error = str(error or "").strip()[:300]
        state.updated_at = _utcnow()


def _as_dict(state: _ProgressState) -> dict[str, Any]:
    return {
        "run_id": state.run_id,
        "domain": state.domain,
        "message": state.message,
        "done": state.done,
        "success": state.success,
        "findings": state.findings,
        "error": state.error,
        "updated_at": state.updated_at.isoformat(),
    }


def get_progress(run_id: str, domain: str) -> dict[str, Any]:
    with _LOCK:
        state = _STATES.get(_key(run_id, domain))
        if state is None:
            k = _key(run_id, domain)
            return {
                "run_id": k[0],
                "domain": k[1],
                "message": "",
                "done": False,
                "success": True,
                "findings": 0,
                "error": "",
                "updated_at": "",
            }
        return _as_dict(state)


def get_run_progress(run_id: str) -> list[dict[str, Any]]:
    rid = str(run_id or "").strip()
    with _LOCK:
        return [_as_dict(state) for (key_run, _), state in _STATES.items() if key_run == rid]


def clear_run(run_id: str) -> None:
    rid = str(run_id or "").strip()
    with _LOCK:
        for key in [k for k in _STATES if k[0] == rid]:
            del _STATES[key]
