from __future__ import annotations

import json
from pathlib import Path

from ..models import Finding, to_finding


def load_manual_findings(path: Path) -> list[Finding]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("findings", None)
    if not isinstance(raw, list):
        raise ValueError("Input JSON must be a list of findings (or an object with a 'findings' list).")
    findings: list[Finding] = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError("Each finding must be an object.")
        finding = to_finding(item)  # type: ignore[arg-type]
        if not finding.source_url:
            raise ValueError("Each finding needs a 'source_url' (or 'url'/'source').")
        findings.append(finding)
    return findings


def dump_result_file(path: Path, payload: dict[str, object]) -> None:
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
