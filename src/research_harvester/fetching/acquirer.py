from __future__ import annotations

import logging

from ..errors import AcquireError, FetchError, RenderError
from ..models import AcquiredContent, ResearchOptions
from .extract import extract_content
from .http import fetch_with_retry
from .render import BrowserLauncher, render_page

logger = logging.getLogger(__name__)


def acquire(
    url: str,
    options: ResearchOptions | None = None,
    *,
    launcher: BrowserLauncher | None = None,
) -> AcquiredContent:
    """Fetch the main-content text of ``url``, cheapest method first.

    Static HTML is tried first. When it fails or yields fewer than
    ``options.static_min_chars`` characters, the page is most likely rendered
    client-side and a headless browser is used instead. The returned url is
    where the page landed after redirects. Raises AcquireError
    when neither path produces text.
    """
    options = options or ResearchOptions.from_settings()
    title = ""
    try:
        result = fetch_with_retry(
            url,
            max_retries=options.max_retries,
            timeout=options.timeout_seconds,
            base_delay=options.retry_base_seconds,
            user_agent=options.user_agent,
        )
    except FetchError as exc:
        static_note = exc.reason
        logger.warning("Static fetch failed url=%s reason=%s; falling back to browser render", url, exc.reason)
    else:
        title, text = extract_content(result.text, url=result.final_url, selectors=options.selectors)
        if len(text) >= options.static_min_chars:
            return AcquiredContent(url=result.final_url or url, text=text, title=title, method="static")
        static_note = f"static content too short ({len(text)} chars)"
        logger.info("Static content too short url=%s chars=%s; falling back to browser render", url, len(text))

    try:
        rendered_url, rendered_title, rendered_text = render_page(
            url,
            timeout_seconds=options.render_timeout_seconds,
            selectors=options.selectors,
            headless=options.headless,
            launcher=launcher,
        )
    except RenderError as exc:
        raise AcquireError(url, f"{static_note}; render failed: {exc}") from exc

    if not rendered_text:
        raise AcquireError(url, f"{static_note}; rendered page has no main content")
    return AcquiredContent(
        url=rendered_url or url, text=rendered_text, title=rendered_title or title, method="dynamic"
    )
