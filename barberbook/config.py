"""
Configuration management using Pydantic models loaded from YAML.
"""

import os
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import MONDAY
from .domain.slot_grid import DEFAULT_SLOT_GRID, build_slot_grid, validate_grid

API_KEY_ENV_VAR = "SUPABASE_KEY"


class AppConfig(BaseModel):
    """Application configuration."""
    supabase_url: str = ""
    supabase_key: str = ""
    timezone: str = "America/Sao_Paulo"
    slot_grid: List[str] = Field(default_factory=lambda: list(DEFAULT_SLOT_GRID))
    slot_step_minutes: Optional[int] = Field(default=None, gt=0)
    fail_open: bool = True
    fallback_closed_weekdays: List[int] = Field(default_factory=lambda: [MONDAY])  # 0=Sunday
    admin_emails: List[str] = Field(default_factory=list)
    log_level: str = "WARNING"

    @field_validator("slot_grid")
    @classmethod
    def validate_slot_grid(cls, value: List[str]) -> List[str]:
        """Ensure the grid is non-empty, HH:MM formatted and sorted."""
        return validate_grid(value)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("fallback_closed_weekdays")
    @classmethod
    def validate_weekdays(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"fallback_closed_weekdays must be between 0 and 6, got {invalid_days}")
        return sorted(set(value))

    @field_validator("admin_emails")
    @classmethod
    def normalize_admin_emails(cls, value: List[str]) -> List[str]:
        """Lower-case and deduplicate the admin allowlist."""
        emails: List[str] = []
        for email in value:
            key = email.strip().lower()
            if "@" not in key:
                raise ValueError(f"Invalid admin email: {email!r}")
            if key not in emails:
                emails.append(key)
        return emails

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def derive_slot_grid(self) -> "AppConfig":
        """With a step set, rebuild the grid between its first and last time."""
        if self.slot_step_minutes:
            self.slot_grid = build_slot_grid(self.slot_grid[0], self.slot_grid[-1], self.slot_step_minutes)
        return self

    @model_validator(mode="after")
    def fill_key_from_environment(self) -> "AppConfig":
        """Read the API key from the environment when the file leaves it out."""
        if not self.supabase_key:
            self.supabase_key = os.environ.get(API_KEY_ENV_VAR, "")
        return self

    def is_admin(self, email: str) -> bool:
        """Check an authenticated identity against the admin allowlist."""
        return bool(email) and email.strip().lower() in self.admin_emails

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of barberbook/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
