# planning_engine/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    PROJECT_NAME: str = "Festival Planning Engine"
    API_PREFIX: str = "/planning"
    LOG_LEVEL: str = "INFO"

    # Forecasting
    SIMILARITY_THRESHOLD: float = 0.6  # Historical samples must score above this
    DEFAULT_VENUE_CAPACITY: int = 1000  # Used when the venue capacity is unknown
    DEFAULT_ATTENDANCE_STD_DEV: float = 500.0  # Used when there is no history

    # Layout
    ALTERNATIVE_LAYOUT_COUNT: int = 2


settings = Settings()
