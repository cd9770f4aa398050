from __future__ import annotations

import hashlib
import logging
import re
from typing import Iterable

from ..models import Finding

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def canonicalize_content(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", str(value or "").lower()).strip()


def content_hash(value: str) -> str:
    return hashlib.sha256(canonicalize_content(value).encode("utf-8")).hexdigest()


def add_alternate_source(finding: Finding, url: str) -> None:
    if not url or url == finding.source_url or url in finding.alternate_sources:
        return
    finding.alternate_sources.append(url)


def deduplicate(findings: Iterable[Finding]) -> list[Finding]:
    """Fold findings with the same canonical content into their first occurrence.

    Versioned or localized copies of one page show up under different URLs;
    the later URLs are kept as alternate sources of the first finding. Findings
    with no content are dropped before hashing.
    """
    seen: dict[str, Finding] = {}
    total = 0
    for finding in findings:
        total += 1
        if not canonicalize_content(finding.content):
            continue
        key = content_hash(finding.content)
        existing = seen.get(key)
        if existing is None:
            seen[key] = finding
            continue
        add_alternate_source(existing, finding.source_url)
        for url in finding.alternate_sources:
            add_alternate_source(existing, url)

    deduped = list(seen.values())
    if total != len(deduped):
        logger.debug("Deduplicated %s -> %s findings", total, len(deduped))
    return deduped
