from __future__ import annotations

import logging
import re
from typing import Callable, Iterable
from urllib.parse import urlparse

from ..errors import ConfigurationError, ResearchError
from ..fetching import acquire
from ..models import (
    AcquiredContent,
    CandidateUrl,
    Finding,
    ResearchOptions,
    ResearchTopic,
    normalize_domain_category,
)
from .dedup import deduplicate

logger = logging.getLogger(__name__)

ECOSYSTEM_URLS: dict[str, tuple[str, ...]] = {
    "react": ("https://react.dev/", "https://react.dev/learn"),
    "nodejs": ("https://nodejs.org/en/docs/", "https://nodejs.org/api/"),
    "node.js": ("https://nodejs.org/en/docs/", "https://nodejs.org/api/"),
    "express": ("https://expressjs.com/", "https://expressjs.com/en/guide/routing.html"),
    "vue": ("https://vuejs.org/", "https://vuejs.org/guide/introduction.html"),
    "angular": ("https://angular.dev/", "https://angular.dev/overview"),
    "svelte": ("https://svelte.dev/", "https://svelte.dev/docs/introduction"),
    "nextjs": ("https://nextjs.org/", "https://nextjs.org/docs"),
    "next.js": ("https://nextjs.org/", "https://nextjs.org/docs"),
    "typescript": ("https://www.typescriptlang.org/", "https://www.typescriptlang.org/docs/"),
    "python": ("https://docs.python.org/", "https://docs.python.org/3/"),
    "django": ("https://docs.djangoproject.com/", "https://www.djangoproject.com/start/"),
    "flask": ("https://flask.palletsprojects.com/", "https://flask.palletsprojects.com/en/stable/"),
    "fastapi": ("https://fastapi.tiangolo.com/", "https://fastapi.tiangolo.com/tutorial/"),
}

GENERIC_URL_PATTERNS = (
    ("https://docs.{name}.com/", "docs-subdomain"),
    ("https://docs.{name}.dev/", "docs-subdomain"),
    ("https://docs.{name}.org/", "docs-subdomain"),
    ("https://{name}.dev/", "project-domain"),
    ("https://{name}.com/", "project-domain"),
    ("https://{name}.org/", "project-domain"),
)

WEB_PLATFORM_HINTS = ("javascript", "html", "css", "web")
MDN_URL = "https://developer.mozilla.org/en-US/docs/Web/{path}"

# Locked decisions that replace the research subject for one domain category.
CONSTRAINT_KEYS: dict[str, tuple[str, ...]] = {
    "STACK": ("technology_stack", "stack"),
    "FEATURES": ("features",),
    "ARCHITECTURE": ("architectural_patterns", "architecture"),
    "PITFALLS": ("pitfalls",),
}

LOW_SIGNAL_HOST_HINTS = ("forum.", "discord.")
LOW_SIGNAL_HOSTS = ("reddit.com",)

_NAME_SANITIZE_RE = re.compile(r"[^a-z0-9.-]")

Acquirer = Callable[[str, ResearchOptions], AcquiredContent]


def resolve_research_subject(topic: ResearchTopic) -> str:
    category = normalize_domain_category(topic.domain_category)
    constraints = topic.constraints or {}
    for key in CONSTRAINT_KEYS.get(category, ()):
        locked = str(constraints.get(key, "") or "").strip()
        if locked:
            logger.info("[%s] Respecting locked decision: %s = %s", category, key, locked)
            return locked
    return topic.topic.strip()


def _ecosystem_key(subject: str) -> str:
    return re.sub(r"\s+", "", subject.lower())


def build_candidate_urls(subject: str, *, max_candidates: int = 3) -> list[CandidateUrl]:
    """Guess where documentation for ``subject`` lives, most authoritative first."""
    key = _ecosystem_key(subject)
    lowered = subject.lower()
    candidates: list[CandidateUrl] = []

    if any(hint in lowered for hint in WEB_PLATFORM_HINTS):
        path = re.sub(r"\s+", "_", subject.strip())
        candidates.append(CandidateUrl(url=MDN_URL.format(path=path), source_hint="mdn"))

    known = ECOSYSTEM_URLS.get(key)
    if known:
        candidates.extend(CandidateUrl(url=url, source_hint="ecosystem-table") for url in known)
    else:
        name = _NAME_SANITIZE_RE.sub("", key).strip(".-")
        if name:
            candidates.extend(
                CandidateUrl(url=pattern.format(name=name), source_hint=hint)
                for pattern, hint in GENERIC_URL_PATTERNS
            )

    deduped: list[CandidateUrl] = []
    seen: set[str] = set()
    for item in candidates:
        if item.url in seen:
            continue
        seen.add(item.url)
        deduped.append(item)
    return deduped[: max(1, int(max_candidates))]


def is_secure_source(url: str) -> bool:
    parsed = urlparse((url or "").strip())
    return parsed.scheme.lower() == "https" and bool(parsed.netloc)


def is_low_signal_source(url: str) -> bool:
    host = (urlparse((url or "").strip()).netloc or "").split(":")[0].lower()
    if not host:
        return False
    if any(host == dom or host.endswith(f".{dom}") for dom in LOW_SIGNAL_HOSTS):
        return True
    return any(hint in host for hint in LOW_SIGNAL_HOST_HINTS)


def filter_findings(findings: Iterable[Finding]) -> list[Finding]:
    kept: list[Finding] = []
    seen_urls: set[str] = set()
    for finding in findings:
        url = finding.source_url
        if not is_secure_source(url):
            logger.debug("Dropping non-https source %s", url)
            continue
        if is_low_signal_source(url):
            logger.debug("Dropping low-signal community source %s", url)
            continue
        if url in seen_urls:
            continue
        seen_urls.add(url)
        kept.append(finding)
    return kept


def research_domain(
    topic: ResearchTopic,
    options: ResearchOptions | None = None,
    *,
    acquirer: Acquirer | None = None,
) -> list[Finding]:
    """Collect findings for one topic in one domain category.

    Candidate URLs are tried one after another. A URL that yields nothing is
    logged and skipped, so the result may be partial or empty; only invalid
    input raises.
    """
    category = normalize_domain_category(topic.domain_category)
    if not str(topic.topic or "").strip():
        raise ConfigurationError("topic must be a non-empty string")
    options = options or ResearchOptions.from_settings()
    fetch_one = acquirer or acquire

    subject = resolve_research_subject(topic)
    candidates = build_candidate_urls(subject, max_candidates=options.max_candidates)
    logger.info("[%s] Researching %r via %s candidate URLs", category, subject, len(candidates))

    raw: list[Finding] = []
    for candidate in candidates:
        try:
            content = fetch_one(candidate.url, options)
        except ResearchError as exc:
            logger.warning("[%s] Skipping %s: %s", category, candidate.url, exc)
            continue
        except Exception:
            logger.exception("[%s] Unexpected failure acquiring %s", category, candidate.url)
            continue
        raw.append(
            Finding(
                content=content.text[: options.content_max_chars],
                source_url=content.url,
                domain_category=category,
                title=content.title or subject,
            )
        )
        logger.info(
            "[%s] Acquired %s (%s, %s chars)", category, content.url, content.method, len(content.text)
        )

    findings = deduplicate(filter_findings(raw))
    logger.info("[%s] Kept %s of %s acquired sources", category, len(findings), len(raw))
    return findings
