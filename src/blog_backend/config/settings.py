"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveInt = Annotated[int, Field(gt=0)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    jwt_secret: NonEmptyStr = Field(validation_alias="JWT_SECRET")
    jwt_ttl_seconds: PositiveInt = Field(default=3600, validation_alias="JWT_TTL_SECONDS")
    api_version: NonEmptyStr = Field(
        default="v1",
        pattern=r"^[A-Za-z0-9_-]+$",
        validation_alias="API_VERSION",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
