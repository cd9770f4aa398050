from __future__ import annotations

from pathlib import PurePosixPath
import re
from typing import Sequence
from urllib.parse import urlparse

from bs4 import BeautifulSoup

DEFAULT_SELECTORS = ("main", "article", ".content")
_NOISE_TAGS = ("script", "style", "noscript", "template", "svg")
_WHITESPACE_RE = re.compile(r"\s+")


def _clean_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value or "").strip()


def _fallback_title(url: str) -> str:
    if not url:
        return ""
    path = PurePosixPath(urlparse(url).path or "/")
    if path.name:
        return path.name[:255]
    return urlparse(url).netloc[:255]


def extract_title(soup: BeautifulSoup, fallback_url: str = "") -> str:
    node = soup.find("title")
    if node is not None:
        title = _clean_text(node.get_text(" "))[:255]
        if title:
            return title
    return _fallback_title(fallback_url)


def extract_main_text(soup: BeautifulSoup, selectors: Sequence[str] = DEFAULT_SELECTORS) -> str:
    for tag in soup.find_all(_NOISE_TAGS):
        tag.decompose()

    picked = soup.select(", ".join(selectors))
    picked_ids = {id(node) for node in picked}
    parts: list[str] = []
    for node in picked:
        # <article> inside <main> is already covered by the outer region.
        if any(id(parent) in picked_ids for parent in node.parents):
            continue
        text = _clean_text(node.get_text(" "))
        if text:
            parts.append(text)
    return " ".join(parts)


def extract_content(
    raw_html: str,
    *,
    url: str = "",
    selectors: Sequence[str] = DEFAULT_SELECTORS,
) -> tuple[str, str]:
    """Return ``(title, text)`` where text covers only the main-content regions."""
    soup = BeautifulSoup(raw_html or "", "lxml")
    title = extract_title(soup, url)
    return title, extract_main_text(soup, selectors)
