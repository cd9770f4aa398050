from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Any, Callable, Iterator, Sequence

from ..errors import RenderError
from .extract import DEFAULT_SELECTORS, extract_content

try:
    from playwright.sync_api import sync_playwright
except ImportError:  # pragma: no cover - optional runtime dependency
    sync_playwright = None


logger = logging.getLogger(__name__)

DEFAULT_RENDER_TIMEOUT_SECONDS = 15.0


class ChromiumSession:
    """One headless Chromium process plus the Playwright driver that owns it."""

    def __init__(self, headless: bool = True) -> None:
        if sync_playwright is None:
            raise RenderError("playwright-not-installed")
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=headless)
        except Exception:
            self._playwright.stop()
            raise

    def new_page(self) -> Any:
        return self._browser.new_page()

    def close(self) -> None:
        try:
            self._browser.close()
        finally:
            self._playwright.stop()


BrowserLauncher = Callable[[bool], Any]


def launch_chromium(headless: bool = True) -> ChromiumSession:
    return ChromiumSession(headless=headless)


@contextmanager
def rendering_context(*, headless: bool = True, launcher: BrowserLauncher | None = None) -> Iterator[Any]:
    """Yield a rendering session that is closed on every exit path."""
    session = (launcher or launch_chromium)(headless)
    try:
        yield session
    finally:
        try:
            session.close()
        except Exception:
            logger.warning("Failed to release rendering context cleanly", exc_info=True)


def render_page(
    url: str,
    *,
    timeout_seconds: float = DEFAULT_RENDER_TIMEOUT_SECONDS,
    selectors: Sequence[str] = DEFAULT_SELECTORS,
    headless: bool = True,
    launcher: BrowserLauncher | None = None,
) -> tuple[str, str, str]:
    """Render ``url`` in a browser, wait for network idle and return ``(final_url, title, text)``."""
    try:
        with rendering_context(headless=headless, launcher=launcher) as session:
            page = session.new_page()
            page.goto(url, wait_until="networkidle", timeout=int(timeout_seconds * 1000))
            rendered_html = page.content() or ""
            page_title = (page.title() or "").strip()
            final_url = page.url or url
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(f"playwright-error:{exc.__class__.__name__}: {exc}") from exc

    title, text = extract_content(rendered_html, url=final_url, selectors=selectors)
    return final_url, page_title or title, text
