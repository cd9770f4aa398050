import os
from functools import lru_cache
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[2]


def _load_env_file_if_present() -> None:
    env_file = BASE_DIR / ".env"
    if not env_file.exists():
        return
    try:
        lines = env_file.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return

    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        os.environ[key] = value


_load_env_file_if_present()


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class Settings:
    def __init__(self) -> None:
        self.user_agent: str = os.getenv("RESEARCH_USER_AGENT", "Mozilla/5.0 (Research Bot)")
        self.request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
        self.render_timeout_seconds: float = float(os.getenv("RENDER_TIMEOUT_SECONDS", "15"))
        self.max_retries: int = int(os.getenv("RESEARCH_MAX_RETRIES", "3"))
        self.retry_base_seconds: float = float(os.getenv("RESEARCH_RETRY_BASE_SECONDS", "1.0"))
        self.concurrency: int = int(os.getenv("RESEARCH_CONCURRENCY", "2"))
        self.static_min_chars: int = int(os.getenv("RESEARCH_STATIC_MIN_CHARS", "100"))
        self.max_candidates: int = int(os.getenv("RESEARCH_MAX_CANDIDATES", "3"))
        self.content_max_chars: int = int(os.getenv("RESEARCH_CONTENT_MAX_CHARS", "500"))
        self.content_selectors: list[str] = _split_csv(
            os.getenv("RESEARCH_CONTENT_SELECTORS", "main,article,.content")
        )
        # Set to 0 to watch the browser while debugging fallback renders.
        self.headless: bool = os.getenv("RESEARCH_HEADLESS", "1").strip() != "0"
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
