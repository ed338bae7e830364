"""Runtime configuration for the job portal service."""

from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Centralized runtime configuration.

    Defaults are suitable for local development; deployments override
    them through environment variables or a `.env` file.
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Database ---
    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_key: str = Field(default="", alias="SUPABASE_KEY")

    # --- Auth ---
    jwt_secret_key: str = Field(default="change-me", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")

    # --- HTTP ---
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        alias="CORS_ORIGINS",
    )

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")

    # --- Pagination ---
    default_page_size: int = Field(default=10, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=50, alias="MAX_PAGE_SIZE")

    # --- Application lifecycle ---
    enforce_status_transitions: bool = Field(default=False, alias="ENFORCE_STATUS_TRANSITIONS")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
