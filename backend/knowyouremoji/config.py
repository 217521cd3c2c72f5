"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - anthropic_api_key / redis_url default to None: absence is detected at use
      time, never papered over with a placeholder
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Content directories default to backend/data so a checkout runs without configuration
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BACKEND_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = BACKEND_ROOT / "data"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Anthropic
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-sonnet-4-5"
    anthropic_max_retries: int = 3
    anthropic_retry_delay_ms: int = 1000
    anthropic_timeout_seconds: int = 60

    # Interpreter
    enable_interpreter: bool = True
    interpreter_max_tokens: int = 1000
    interpreter_temperature: float = 0.7

    # Cache
    redis_url: str | None = None
    interpretation_cache_ttl: int = 86400

    # Content
    emojis_dir: Path = DEFAULT_DATA_DIR / "emojis"
    combos_dir: Path = DEFAULT_DATA_DIR / "combos"

    # Daily quota (CLI)
    daily_max_uses: int = 3
    usage_storage_path: Path = Path.home() / ".knowyouremoji" / "usage.json"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("anthropic_api_key", "redis_url", mode="before")
    @classmethod
    def blank_as_unset(cls, v):
        """An empty env var means "not configured"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def interpreter_configured(self) -> bool:
        return self.enable_interpreter and self.anthropic_api_key is not None


@lru_cache
def get_settings() -> Settings:
    return Settings()
