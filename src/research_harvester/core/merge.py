from __future__ import annotations

import dataclasses
import logging
from typing import Iterable

from ..models import CONFIDENCE_LEVELS, Finding
from .dedup import add_alternate_source, canonicalize_content, deduplicate

logger = logging.getLogger(__name__)

_CONFIDENCE_RANK = {level: idx for idx, level in enumerate(CONFIDENCE_LEVELS)}


def merge_findings(automated: Iterable[Finding], manual: Iterable[Finding]) -> list[Finding]:
    """Combine automated findings with caller-supplied manual ones.

    Findings are folded by source URL first and by content hash second. When
    a manual finding shares its URL with an automated one, the manual finding
    takes the automated entry's place and inherits its alternate sources. The
    shared URL is already the manual finding's own source, so it is not
    recorded again as an alternate. A manual finding without content (for
    example one that only marks a page as verified) keeps the automated
    capture's text.
    """
    by_url: dict[str, Finding] = {}
    manual_urls: set[str] = set()

    for finding in automated or []:
        url = (finding.source_url or "").strip()
        if not url:
            logger.debug("Ignoring automated finding without a source url")
            continue
        by_url.setdefault(url, finding)

    for finding in manual or []:
        url = (finding.source_url or "").strip()
        if not url:
            logger.debug("Ignoring manual finding without a source url")
            continue
        existing = by_url.get(url)
        if existing is None:
            by_url[url] = finding
            manual_urls.add(url)
            continue
        if url in manual_urls:
            continue
        if not canonicalize_content(finding.content):
            finding = dataclasses.replace(
                finding,
                content=existing.content,
                title=finding.title or existing.title,
                alternate_sources=list(finding.alternate_sources),
            )
        for alt in existing.alternate_sources:
            add_alternate_source(finding, alt)
        by_url[url] = finding
        manual_urls.add(url)

    return deduplicate(by_url.values())


def rank_by_confidence(findings: Iterable[Finding]) -> list[Finding]:
    """Stable HIGH -> MEDIUM -> LOW -> UNVERIFIED ordering."""
    return sorted(findings, key=lambda item: _CONFIDENCE_RANK.get(item.confidence_level, len(_CONFIDENCE_RANK)))
