"""Configuration Management."""

from functools import lru_cache
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Kernel settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="SYMKERNEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Engine
    history_limit: int = Field(default=100, gt=0, description="Prior results kept by the session")
    recursion_limit: int = Field(
        default=256, gt=0, le=10_000, description="Max binding substitution depth"
    )
    filesystem_enabled: bool = Field(default=True, description="Allow Get[] to read files")
    parse_cache_size: int = Field(default=256, gt=0, description="Parsed input cache size")

    # Output form
    max_fraction_digits: int = Field(default=4, ge=0, le=20, description="Max digits after point")
    min_fraction_digits: int = Field(default=1, ge=0, le=20, description="Min digits after point")

    # Isolation
    supervised: bool = Field(default=False, description="Evaluate in a supervised worker process")
    eval_timeout: float | None = Field(
        default=None, gt=0, description="Per-cell timeout in seconds (supervised mode only)"
    )

    @model_validator(mode="after")
    def check_fraction_digits(self) -> "Settings":
        """Minimum fractional digits cannot exceed the maximum."""
        if self.min_fraction_digits > self.max_fraction_digits:
            raise ValueError("min_fraction_digits must not exceed max_fraction_digits")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
