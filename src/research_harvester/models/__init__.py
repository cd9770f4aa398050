from .research import (
    ACQUISITION_METHODS,
    CONFIDENCE_LEVELS,
    DOMAIN_CATEGORIES,
    MAX_CONCURRENCY,
    MIN_CONCURRENCY,
    AcquiredContent,
    CandidateUrl,
    DomainResult,
    Finding,
    RawFinding,
    ResearchOptions,
    ResearchTopic,
    normalize_domain_category,
    to_finding,
)

__all__ = [
    "ACQUISITION_METHODS",
    "CONFIDENCE_LEVELS",
    "DOMAIN_CATEGORIES",
    "MAX_CONCURRENCY",
    "MIN_CONCURRENCY",
    "AcquiredContent",
    "CandidateUrl",
    "DomainResult",
    "Finding",
    "RawFinding",
    "ResearchOptions",
    "ResearchTopic",
    "normalize_domain_category",
    "to_finding",
]
