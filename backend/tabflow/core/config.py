"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Application ───────────────────────────
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ── Workflow ──────────────────────────────
    # Delay before each of the 11 progress ticks of a step.
    STEP_TICK_INTERVAL_MS: int = Field(default=200, ge=0)
    STEP_SUCCESS_RATE: float = Field(default=0.9, ge=0.0, le=1.0)
    STEP_RANDOM_SEED: int | None = None

    # When set, steps are executed by POSTing to this URL instead of the
    # random executor.  "{step_id}" is substituted.
    STEP_EXECUTOR_URL: str = ""
    STEP_EXECUTOR_TIMEOUT_SECONDS: float = 30.0

    # ── Ingestion ─────────────────────────────
    INGEST_INFER_TYPES: bool = True
    INGEST_CSV_ENCODING: str = "utf-8-sig"

    # ── Connection checks ─────────────────────
    CONNECTION_CHECK_URLS: list[str] = Field(default_factory=list)
    CONNECTION_TIMEOUT_SECONDS: float = 5.0

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}

    @property
    def tick_interval(self) -> float:
        """Step tick delay in seconds."""
        return self.STEP_TICK_INTERVAL_MS / 1000


settings = Settings()
