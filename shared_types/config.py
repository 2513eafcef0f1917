from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SERVICE_NAME: str = "shared-types"
    DEPLOY_ENV: Literal["development", "production", "test"] = "development"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # one JSON object per line instead of colored console output

    # Upper bound on issues reported by boundary helpers for one payload
    VALIDATION_MAX_ISSUES: int = Field(default=50, ge=1)

    @property
    def is_production(self) -> bool:
        return self.DEPLOY_ENV == "production"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
