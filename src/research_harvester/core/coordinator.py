from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import dataclasses
import logging
from types import MappingProxyType
from typing import Callable, Mapping, Sequence
from uuid import uuid4

from ..errors import ConfigurationError, DomainError
from ..models import (
    DOMAIN_CATEGORIES,
    DomainResult,
    Finding,
    ResearchOptions,
    ResearchTopic,
    normalize_domain_category,
)
from ..progress_tracker import clear_run, fail_progress, finish_progress, start_progress
from .researcher import research_domain

logger = logging.getLogger(__name__)

DomainResearcher = Callable[[ResearchTopic, ResearchOptions], list[Finding]]


def _resolve_categories(domain_categories: Sequence[str] | None) -> list[str]:
    requested = list(domain_categories) if domain_categories is not None else list(DOMAIN_CATEGORIES)
    if not requested:
        raise ConfigurationError("at least one domain category is required")
    categories: list[str] = []
    for value in requested:
        category = normalize_domain_category(value)
        if category not in categories:
            categories.append(category)
    return categories


def coordinate(
    topic: str,
    domain_categories: Sequence[str] | None = None,
    *,
    constraints: Mapping[str, str] | None = None,
    options: ResearchOptions | None = None,
    concurrency: int | None = None,
    researcher: DomainResearcher | None = None,
    run_id: str | None = None,
) -> dict[str, DomainResult]:
    """Research several domain categories of one topic in parallel.

    At most ``concurrency`` domains run at once; the rest wait in the pool
    queue. A domain that raises is reported through ``DomainResult.error``
    and never affects its siblings. Input is validated before any work starts.

    Progress entries for a generated run id are dropped once the run settles.
    Callers that pass ``run_id`` read progress under that id and own its
    cleanup through ``progress_tracker.clear_run``.
    """
    if not isinstance(topic, str) or not topic.strip():
        raise ConfigurationError("topic must be a non-empty string")
    categories = _resolve_categories(domain_categories)
    options = options or ResearchOptions.from_settings()
    if concurrency is not None:
        options = dataclasses.replace(options, concurrency=concurrency)
    options.validate()

    research = researcher or research_domain
    locked = MappingProxyType(dict(constraints or {}))
    run = run_id or uuid4().hex[:12]

    logger.info(
        "Starting multi-domain research run=%s topic=%r domains=%s concurrency=%s",
        run,
        topic,
        ",".join(categories),
        options.concurrency,
    )

    def _run_unit(category: str) -> DomainResult:
        start_progress(run, category, f"Researching {topic}")
        logger.info("[%s] Starting research for: %s", category, topic)
        try:
            findings = research(
                ResearchTopic(topic=topic, domain_category=category, constraints=locked),
                options,
            )
        except Exception as exc:
            error = DomainError(category, f"{exc.__class__.__name__}: {exc}")
            logger.exception("[%s] Research failed", category)
            fail_progress(run, category, str(error))
            return DomainResult(domain_category=category, findings=[], error=str(error))
        findings = list(findings or [])
        finish_progress(run, category, len(findings), f"Found {len(findings)} sources")
        logger.info("[%s] Found %s sources", category, len(findings))
        return DomainResult(domain_category=category, findings=findings)

    results: dict[str, DomainResult] = {}
    try:
        with ThreadPoolExecutor(max_workers=options.concurrency, thread_name_prefix="research") as executor:
            futures = {category: executor.submit(_run_unit, category) for category in categories}
            for category, future in futures.items():
                results[category] = future.result()
    finally:
        if run_id is None:
            clear_run(run)

    total = sum(len(result.findings) for result in results.values())
    failed = [category for category, result in results.items() if result.failed]
    logger.info(
        "Completed multi-domain research run=%s findings=%s failed_domains=%s",
        run,
        total,
        ",".join(failed) or "-",
    )
    return results
