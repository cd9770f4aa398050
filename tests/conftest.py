from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"

if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def recorded_sleeps(monkeypatch):
    """Replace time.sleep with a recorder so retry delays can be asserted without waiting."""
    from research_harvester.fetching import http

    calls: list[float] = []
    monkeypatch.setattr(http.time, "sleep", lambda seconds: calls.append(float(seconds)))
    return calls
