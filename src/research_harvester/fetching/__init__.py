from .acquirer import acquire
from .extract import extract_content
from .http import FetchResult, fetch_with_retry
from .render import render_page, rendering_context

__all__ = ["FetchResult", "acquire", "extract_content", "fetch_with_retry", "render_page", "rendering_context"]
