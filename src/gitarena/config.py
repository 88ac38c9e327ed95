"""Application settings, read from the environment and ``.env``."""
from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GITARENA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATABASE_URL: str = "sqlite:///data/gitarena.db"
    DASHBOARD_TIMEOUT: float = Field(default=5.0, description="Per-source timeout in seconds")
    LOG_LEVEL: str = "INFO"

    @field_validator("DASHBOARD_TIMEOUT")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("DASHBOARD_TIMEOUT must be greater than zero")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def level_upper(cls, v: str) -> str:
        return v.upper()

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
