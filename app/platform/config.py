from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "SEO Page Analyzer"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # ── Static fetch ────────────────────────────
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )
    STATIC_FETCH_TIMEOUT: float = 15.0
    STATIC_FETCH_MAX_REDIRECTS: int = 5

    # ── Rendered fetch (headless Chrome) ────────
    RENDER_NAVIGATION_TIMEOUT: float = 10.0
    NETWORK_IDLE_WINDOW: float = 0.5  # seconds without new resource entries
    NETWORK_IDLE_POLL_INTERVAL: float = 0.1
    CHROMEDRIVER_PATH: Optional[str] = None
    CHROME_BINARY_PATH: Optional[str] = None

    # ── Logging ─────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
