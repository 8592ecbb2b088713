from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from flashbox.core.enums import DemotionPolicy


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATABASE_URL: str = "sqlite:///./flashbox.db"

    # "today" is computed in this zone (IANA name)
    TIMEZONE: str = "UTC"

    DEMOTION_POLICY: DemotionPolicy = DemotionPolicy.step_down
    DEFAULT_SESSION_LIMIT: int = 50

    PERSIST_RETRY_ATTEMPTS: int = 3
    PERSIST_RETRY_DELAY_SECONDS: float = 0.2

    SESSION_TTL_MINUTES: int = 60

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["http://localhost:8081"]


settings = Settings()
