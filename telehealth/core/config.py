# telehealth/core/config.py
import os
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_SECRET = "change-me-in-prod"


def _csv(value: str) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # App
    APP_NAME: str = "Telehealth API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Storage
    DATABASE_URL: str = "sqlite:///./telehealth.db"

    # Auth
    SECRET_KEY: str = Field(default=PLACEHOLDER_SECRET, alias="JWT_SECRET_KEY")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12
    MIN_PASSWORD_LENGTH: int = 6

    # CORS, as comma-separated strings so plain env vars work
    ALLOWED_ORIGINS: str = "*"
    ALLOWED_METHODS: str = "GET,POST,PUT,DELETE,OPTIONS"
    ALLOWED_HEADERS: str = "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    # Request handling
    MAX_REQUEST_SIZE: int = 1024 * 1024  # JSON bodies only
    GZIP_MIN_SIZE: int = 500

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def allowed_origins_list(self) -> List[str]:
        return _csv(self.ALLOWED_ORIGINS)

    @property
    def allowed_methods_list(self) -> List[str]:
        return _csv(self.ALLOWED_METHODS)

    @property
    def allowed_headers_list(self) -> List[str]:
        return _csv(self.ALLOWED_HEADERS)

    @property
    def secret_key_configured(self) -> bool:
        return bool(self.SECRET_KEY) and self.SECRET_KEY != PLACEHOLDER_SECRET


@lru_cache()
def get_settings() -> Settings:
    s = Settings()
    # Deployments that set CORS_ORIGINS instead of ALLOWED_ORIGINS
    if os.environ.get("CORS_ORIGINS"):
        s.ALLOWED_ORIGINS = os.environ["CORS_ORIGINS"]
    return s


settings: Settings = get_settings()
