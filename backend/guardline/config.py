from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Local development runs on sqlite; production sets DATABASE_URL to postgres
    DATABASE_URL: str = "sqlite:///./guardline.db"
    DB_ECHO: bool = False
    SECRET_KEY: str = "change-me-in-production"

    # JWT
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    APP_TITLE: str = "Guardline Ops"
    APP_VERSION: str = "0.1.0"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
