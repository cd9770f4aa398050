from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, TypedDict

from ..config import Settings, get_settings
from ..core.authority import classify_source
from ..errors import ConfigurationError

DOMAIN_CATEGORIES = ("STACK", "FEATURES", "ARCHITECTURE", "PITFALLS")
CONFIDENCE_LEVELS = ("HIGH", "MEDIUM", "LOW", "UNVERIFIED")
ACQUISITION_METHODS = ("static", "dynamic")

MIN_CONCURRENCY = 1
MAX_CONCURRENCY = 10
DEFAULT_SELECTORS = ("main", "article", ".content")


class RawFinding(TypedDict, total=False):
    source_url: str
    url: str
    source: str
    content: str
    title: str
    domain_category: str
    verified: bool
    alternate_sources: list[str]


@dataclass(slots=True, frozen=True)
class ResearchTopic:
    topic: str
    domain_category: str
    constraints: Mapping[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class CandidateUrl:
    url: str
    source_hint: str


@dataclass(slots=True, frozen=True)
class AcquiredContent:
    url: str
    text: str
    title: str
    method: str


@dataclass(slots=True)
class Finding:
    content: str
    source_url: str
    domain_category: str
    title: str = ""
    verified: bool = False
    alternate_sources: list[str] = field(default_factory=list)
    confidence_level: str = field(init=False)

    def __post_init__(self) -> None:
        self.confidence_level = classify_source(self.source_url, verified=self.verified)

    def to_payload(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "source_url": self.source_url,
            "domain_category": self.domain_category,
            "confidence_level": self.confidence_level,
            "verified": self.verified,
            "alternate_sources": list(self.alternate_sources),
        }


@dataclass(slots=True)
class DomainResult:
    domain_category: str
    findings: list[Finding] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_payload(self) -> dict[str, Any]:
        return {
            "findings": [item.to_payload() for item in self.findings],
            "error": self.error,
        }


@dataclass(slots=True, frozen=True)
class ResearchOptions:
    """Per-call tunables. Defaults mirror the environment-backed Settings."""

    concurrency: int = 2
    max_retries: int = 3
    retry_base_seconds: float = 1.0
    timeout_seconds: float = 10.0
    render_timeout_seconds: float = 15.0
    static_min_chars: int = 100
    max_candidates: int = 3
    content_max_chars: int = 500
    selectors: tuple[str, ...] = DEFAULT_SELECTORS
    user_agent: str = "Mozilla/5.0 (Research Bot)"
    headless: bool = True

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> ResearchOptions:
        settings = settings or get_settings()
        values: dict[str, Any] = {
            "concurrency": settings.concurrency,
            "max_retries": settings.max_retries,
            "retry_base_seconds": settings.retry_base_seconds,
            "timeout_seconds": settings.request_timeout_seconds,
            "render_timeout_seconds": settings.render_timeout_seconds,
            "static_min_chars": settings.static_min_chars,
            "max_candidates": settings.max_candidates,
            "content_max_chars": settings.content_max_chars,
            "selectors": tuple(settings.content_selectors) or DEFAULT_SELECTORS,
            "user_agent": settings.user_agent,
            "headless": settings.headless,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def validate(self) -> ResearchOptions:
        if not MIN_CONCURRENCY <= int(self.concurrency) <= MAX_CONCURRENCY:
            raise ConfigurationError(
                f"concurrency must be between {MIN_CONCURRENCY} and {MAX_CONCURRENCY}, got {self.concurrency}"
            )
        if int(self.max_retries) < 1:
            raise ConfigurationError(f"max_retries must be at least 1, got {self.max_retries}")
        if float(self.retry_base_seconds) < 0:
            raise ConfigurationError("retry_base_seconds must not be negative")
        if float(self.timeout_seconds) <= 0 or float(self.render_timeout_seconds) <= 0:
            raise ConfigurationError("timeouts must be positive")
        if int(self.max_candidates) < 1:
            raise ConfigurationError("max_candidates must be at least 1")
        if int(self.content_max_chars) < 1:
            raise ConfigurationError("content_max_chars must be at least 1")
        if not self.selectors:
            raise ConfigurationError("at least one content selector is required")
        return self


def normalize_domain_category(value: str) -> str:
    category = str(value or "").strip().upper()
    if category not in DOMAIN_CATEGORIES:
        raise ConfigurationError(
            f"unknown domain category {value!r}; expected one of {', '.join(DOMAIN_CATEGORIES)}"
        )
    return category


def to_finding(payload: RawFinding, *, default_domain: str = "") -> Finding:
    source_url = str(payload.get("source_url") or payload.get("url") or payload.get("source") or "").strip()
    domain = str(payload.get("domain_category") or default_domain or "").strip().upper()
    alternates = payload.get("alternate_sources") or []
    return Finding(
        content=str(payload.get("content", "") or ""),
        source_url=source_url,
        domain_category=domain,
        title=str(payload.get("title", "") or ""),
        verified=bool(payload.get("verified", False)),
        alternate_sources=[str(item) for item in alternates if item],
    )
