from __future__ import annotations


class ResearchError(Exception):
    """Base class for every error raised by the research engine."""


class ConfigurationError(ResearchError, ValueError):
    """Invalid input detected before any work starts. Never retried."""


class FetchError(ResearchError):
    def __init__(
        self,
        url: str,
        reason: str,
        *,
        status_code: int | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(f"fetch failed for {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code
        self.attempts = attempts


class AcquireError(ResearchError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"no usable content from {url}: {reason}")
        self.url = url
        self.reason = reason


class RenderError(ResearchError):
    """Dynamic rendering could not produce a page (browser missing, navigation failed)."""


class DomainError(ResearchError):
    def __init__(self, domain_category: str, reason: str) -> None:
        super().__init__(reason)
        self.domain_category = domain_category
        self.reason = reason
