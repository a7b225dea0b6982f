"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # ======================
    # Timezone
    # ======================
    TIMEZONE: str = "Asia/Jakarta"

    # ======================
    # Hijri calendar
    # ======================
    # Shift applied before Gregorian -> Hijri conversion to line up the
    # tabular calendar with the locally announced month start.
    HIJRI_OFFSET_DAYS: int = 0
    RAMADHAN_OVERRIDE_MAX_SPAN_DAYS: int = 40

    # ======================
    # Remote calendar (Aladhan)
    # ======================
    ALADHAN_ENABLED: bool = True
    ALADHAN_BASE_URL: str = "https://api.aladhan.com/v1"
    ALADHAN_TIMEOUT_SECONDS: float = 10.0
    CALENDAR_CACHE_TTL_SECONDS: int = 86_400

    # ======================
    # Redis
    # ======================
    REDIS_ENABLED: bool = False
    REDIS_URL: str = "redis://localhost:6379/0"

    # ======================
    # Config store
    # ======================
    CONFIG_STORE_BACKEND: str = "memory"  # memory | redis | yaml
    CONFIG_STORE_PATH: str = "data/fasting_config.yml"

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
