"""
Configuration Models

Pydantic models for application settings validation.
"""

import json
from pathlib import Path
from pydantic import BaseModel, Field, ValidationInfo, field_validator


class GenerationConfig(BaseModel):
    """Pathway generation call settings."""

    model: str | None = Field(default=None, description="Model override; SDK default when unset")
    timeout_seconds: float = Field(default=180.0, gt=0)
    max_turns: int = Field(default=1, gt=0, le=10)
    api_key_env: str = Field(default="ANTHROPIC_API_KEY", min_length=1)


class SearchConfig(BaseModel):
    """Grounded live search settings."""

    timeout_seconds: float = Field(default=90.0, gt=0)
    max_turns: int = Field(default=4, gt=0, le=20)
    search_url: str = Field(default="https://www.google.com/search?q=")
    site_filter: str = Field(default="site:.gov.in OR site:.nic.in")


class ProgressConfig(BaseModel):
    """Simulated progress indicator settings."""

    tick_seconds: float = Field(default=0.4, gt=0)
    min_increment: int = Field(default=5, ge=0)
    max_increment: int = Field(default=14, ge=0)
    cap: int = Field(default=95, gt=0, lt=100)
    completion_delay_seconds: float = Field(default=0.5, ge=0)

    @field_validator("max_increment")
    @classmethod
    def validate_increment_ordering(cls, v: int, info: ValidationInfo) -> int:
        """Validate that max_increment >= min_increment."""
        low = info.data.get("min_increment", 5)
        if v < low:
            raise ValueError(
                f"max_increment ({v}) must be greater than or equal to "
                f"min_increment ({low})"
            )
        return v


class ShareConfig(BaseModel):
    """Share text and status settings."""

    app_url: str = Field(default="")
    status_revert_seconds: float = Field(default=2.5, ge=0)


class StorageConfig(BaseModel):
    """Local storage settings."""

    storage_dir: str = Field(default=".pathfinder")


class ExportConfig(BaseModel):
    """PDF export settings."""

    output_dir: str = Field(default="output")


class AppSettings(BaseModel):
    """Application settings model."""

    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    progress: ProgressConfig = Field(default_factory=ProgressConfig)
    share: ShareConfig = Field(default_factory=ShareConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "AppSettings":
        """Load application settings from a config file.

        A missing file yields the defaults; the file is optional.

        Args:
            config_path: Path to app_settings.json (defaults to config/app_settings.json)

        Returns:
            AppSettings: Validated configuration

        Raises:
            json.JSONDecodeError: If the file is not valid JSON
            pydantic.ValidationError: If config validation fails
        """
        if config_path is None:
            config_path = Path("config/app_settings.json")
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            config_data = json.load(f)

        return cls(**config_data)
