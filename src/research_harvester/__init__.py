from __future__ import annotations

from pathlib import Path
import tomllib

from .core.authority import classify_source
from .core.coordinator import coordinate
from .core.dedup import deduplicate
from .core.merge import merge_findings, rank_by_confidence
from .core.researcher import research_domain
from .errors import AcquireError, ConfigurationError, DomainError, FetchError, ResearchError
from .fetching import acquire, fetch_with_retry
from .models import AcquiredContent, DomainResult, Finding, ResearchOptions, ResearchTopic

__version__ = "0.1.0"


def get_runtime_version() -> str:
    candidates: list[Path] = [
        Path.cwd() / "pyproject.toml",
        Path(__file__).resolve().parents[2] / "pyproject.toml",
    ]

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        if not path.exists():
            continue
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            continue
        project = data.get("project", {}) or {}
        if str(project.get("name", "")).strip() != "research-harvester":
            continue
        version = str(project.get("version", "")).strip()
        if version:
            return version
    return __version__


__all__ = [
    "AcquireError",
    "AcquiredContent",
    "ConfigurationError",
    "DomainError",
    "DomainResult",
    "FetchError",
    "Finding",
    "ResearchError",
    "ResearchOptions",
    "ResearchTopic",
    "__version__",
    "acquire",
    "classify_source",
    "coordinate",
    "deduplicate",
    "fetch_with_retry",
    "get_runtime_version",
    "merge_findings",
    "rank_by_confidence",
    "research_domain",
]
