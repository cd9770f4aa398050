from __future__ import annotations

from dataclasses import dataclass
from email.utils import parsedate_to_datetime
import logging
import random
import time
from typing import Any

import requests

from ..errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Research Bot)"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE_SECONDS = 1.0
RETRYABLE_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})
TRANSIENT_EXCEPTIONS = (
    requests.Timeout,
    requests.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
)


@dataclass(slots=True)
class FetchResult:
    url: str
    final_url: str
    status_code: int
    content_type: str
    text: str
    attempts: int = 1


@dataclass(slots=True)
class RetryState:
    max_attempts: int
    base_delay: float
    attempt: int = 0

    @property
    def is_last(self) -> bool:
        return self.attempt >= self.max_attempts - 1

    def backoff_seconds(self) -> float:
        return (2**self.attempt) * self.base_delay + random.uniform(0, self.base_delay)


def _retry_after_seconds(headers: dict[str, Any] | Any) -> float | None:
    raw = str((headers or {}).get("Retry-After", "")).strip()
    if not raw:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        pass
    try:
        dt = parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if dt is None:
        return None
    return max(0.0, dt.timestamp() - time.time())


def fetch_with_retry(
    url: str,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    base_delay: float = DEFAULT_BACKOFF_BASE_SECONDS,
    user_agent: str = DEFAULT_USER_AGENT,
) -> FetchResult:
    """GET a URL, retrying transient failures.

    A 429 carrying Retry-After waits exactly the server-specified duration,
    including after the final attempt, so a FetchError is never returned
    inside the server's rate-limit window. Every other transient failure
    (timeouts, dropped connections or bodies, 5xx) backs off exponentially
    with jitter. Non-retryable HTTP statuses fail on the first attempt.
    """
    headers = {"User-Agent": user_agent}
    state = RetryState(max_attempts=max(1, int(max_retries)), base_delay=max(0.0, float(base_delay)))
    last_reason = "no attempt made"
    last_status: int | None = None

    for attempt in range(state.max_attempts):
        state.attempt = attempt
        try:
            res = requests.get(url, timeout=timeout, headers=headers, allow_redirects=True)
        except TRANSIENT_EXCEPTIONS as exc:
            last_reason = f"{exc.__class__.__name__}: {exc}"
            last_status = None
        except requests.RequestException as exc:
            raise FetchError(url, f"{exc.__class__.__name__}: {exc}", attempts=attempt + 1) from exc
        else:
            if res.status_code < 400:
                return FetchResult(
                    url=url,
                    final_url=res.url or url,
                    status_code=res.status_code,
                    content_type=res.headers.get("Content-Type", ""),
                    text=res.text or "",
                    attempts=attempt + 1,
                )
            last_status = res.status_code
            last_reason = f"http_status={res.status_code}"
            if res.status_code == 429:
                retry_after = _retry_after_seconds(res.headers)
                if retry_after is not None:
                    logger.warning(
                        "Rate limited url=%s attempt=%s/%s retry_after=%.2fs",
                        url,
                        attempt + 1,
                        state.max_attempts,
                        retry_after,
                    )
                    time.sleep(retry_after)
                    continue
            if res.status_code not in RETRYABLE_STATUS_CODES:
                raise FetchError(url, last_reason, status_code=res.status_code, attempts=attempt + 1)

        if state.is_last:
            break
        wait_seconds = state.backoff_seconds()
        logger.warning(
            "Transient fetch failure url=%s reason=%s attempt=%s/%s wait=%.2fs",
            url,
            last_reason,
            attempt + 1,
            state.max_attempts,
            wait_seconds,
        )
        time.sleep(wait_seconds)

    raise FetchError(url, last_reason, status_code=last_status, attempts=state.max_attempts)
