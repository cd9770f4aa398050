from __future__ import annotations

import re

# Tiers are checked in order; the first matching pattern wins.
AUTHORITY_RULES: tuple[tuple[str, tuple[re.Pattern[str], ...]], ...] = (
    (
        "HIGH",
        (
            re.compile(r"^https://docs\."),
            re.compile(r"^https://[^/]+\.dev(?::\d+)?/"),
            re.compile(r"/official/"),
            re.compile(r"github\.com/[^/]+/[^/]+/(?:blob/[^/]+/|tree/[^/]+/)?docs/"),
            re.compile(r"^https://[^/]+\.org/docs/"),
        ),
    ),
    (
        "MEDIUM",
        (
            re.compile(r"developer\.mozilla\.org"),
            re.compile(r"stackoverflow\.com"),
            re.compile(r"\.edu(?::\d+)?/"),
            re.compile(r"\.gov(?::\d+)?/"),
        ),
    ),
    (
        "LOW",
        (
            re.compile(r"medium\.com"),
            re.compile(r"dev\.to"),
            re.compile(r"hashnode\.dev"),
            re.compile(r"//blog\.|\.blog(?:/|$)|/blog/"),
        ),
    ),
)

# hashnode.dev matches the generic .dev rule above, so blog platforms are
# screened before the HIGH tier is consulted.
_BLOG_PLATFORM_HOSTS = re.compile(r"^https?://(?:[^/]+\.)?(?:hashnode\.dev|medium\.com|dev\.to)(?::\d+)?(?:/|$)")


def _with_path(url: str) -> str:
    # "https://react.dev" and "https://react.dev/" must classify the same way.
    value = (url or "").strip().lower()
    scheme_end = value.find("://")
    if scheme_end >= 0 and "/" not in value[scheme_end + 3 :]:
        value += "/"
    return value


def classify_authority(url: str) -> str:
    value = _with_path(url)
    if not value:
        return "UNVERIFIED"
    if _BLOG_PLATFORM_HOSTS.search(value):
        return "LOW"
    for tier, patterns in AUTHORITY_RULES:
        if any(pattern.search(value) for pattern in patterns):
            return tier
    return "UNVERIFIED"


def classify_source(url: str, verified: bool = False) -> str:
    """Return the confidence level for a source URL.

    A source cross-checked against official documentation is always HIGH,
    whatever its URL looks like.
    """
    if verified:
        return "HIGH"
    return classify_authority(url)
