import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .terrain_settings import TerrainSettings

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / ".env"


def load_env_file(env_file: Path = ENV_FILE) -> int:
    """
    Copy values from a local .env file into the environment.

    Variables already set in the environment win over the file.

    Returns:
        Number of variables added
    """
    if not env_file.exists():
        return 0
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v
    return len(missing_keys)


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ISOTERRAIN_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="console", description="Logging format (console or json)"
    )

    # Generation Configuration
    biome_seed: Optional[int] = Field(
        default=None, ge=0, le=0xFFFFFFFF, description="Locked seed for biome generation"
    )

    # Terrain Configuration
    terrain: TerrainSettings = Field(default_factory=TerrainSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, reading a local .env file first."""
    load_env_file()
    return Settings()
