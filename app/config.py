from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    # Supabase (fonte dos registros e sink de eventos)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    ENVIRONMENT: str = "development"
    DEV_MODE: bool = True  # Sem Supabase configurado, usa fonte em memória

    # API
    API_V1_PREFIX: str = "/api/v1"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Cache de analytics
    ANALYTICS_CACHE_TIMEOUT_SECONDS: int = 300  # 5 minutos
    ANALYTICS_CACHE_MAX_ENTRIES: Optional[int] = None  # None = sem limite

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )


settings = Settings()
