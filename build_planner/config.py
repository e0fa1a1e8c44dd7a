"""Application configuration with environment variable validation."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_ROOT = Path(__file__).resolve().parent
_PROJECT_ROOT = _PACKAGE_ROOT.parent
_ENV_FILE = _PROJECT_ROOT / ".env"
DEFAULT_DATA_DIR = _PACKAGE_ROOT / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Catalog data
    data_dir: Path = Field(default=DEFAULT_DATA_DIR, validation_alias="BUILD_DATA_DIR")
    detect_requires_cycles: bool = Field(
        default=True,
        validation_alias="DETECT_REQUIRES_CYCLES",
    )

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # CORS
    allowed_origins: list[str] | str = Field(
        default=["*"],
        validation_alias="ALLOWED_ORIGINS",
    )

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.allowed_origins, str):
            return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return self.allowed_origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
