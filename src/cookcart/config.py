"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_CONFIG_DIR = "config"
AUTO_AISLE = "aisle.conf"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Recipe collection; its config/aisle.conf is used when no aisle_path is set
    recipes_dir: Path = Path(".")

    # Mapping and unit files
    aisle_path: Path | None = None
    units_path: Path | None = None

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def resolve_aisle_path(self) -> Path | None:
        """Explicit aisle_path, else the collection's config/aisle.conf if present."""
        if self.aisle_path is not None:
            return self.aisle_path
        auto = self.recipes_dir / LOCAL_CONFIG_DIR / AUTO_AISLE
        return auto if auto.is_file() else None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
