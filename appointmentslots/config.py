"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import (
    WEEKDAY_NAMES,
    BusinessSettings,
    DayHours,
    WeeklyHours,
    parse_clock,
)


class DayHoursConfig(BaseModel):
    """Opening hours for one weekday."""
    is_open: bool = False
    open: Optional[str] = None
    close: Optional[str] = None

    @field_validator("open", "close")
    @classmethod
    def validate_clock(cls, value: Optional[str]) -> Optional[str]:
        """Validate HH:mm format."""
        if value is not None:
            parse_clock(value)
        return value

    @model_validator(mode="after")
    def validate_window(self) -> "DayHoursConfig":
        """Ensure an open day has a window that opens before it closes."""
        if self.is_open:
            if self.open is None or self.close is None:
                raise ValueError("open and close are required when is_open is true")
            if parse_clock(self.open) >= parse_clock(self.close):
                raise ValueError(f"open ({self.open}) must be earlier than close ({self.close})")
        return self

    def to_day_hours(self) -> DayHours:
        return DayHours(is_open=self.is_open, open=self.open, close=self.close)


class DefaultsConfig(BaseModel):
    """Default settings for queries and businesses without their own record."""
    service_duration_minutes: int = 30
    slot_interval_minutes: int = 30

    @field_validator("service_duration_minutes", "slot_interval_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations are positive."""
        if value <= 0:
            raise ValueError(f"Value must be greater than zero, got {value}")
        return value


class BusinessConfig(BaseModel):
    """Settings record of one business."""
    id: str
    name: str = ""
    slot_interval_minutes: Optional[int] = None
    working_hours: Optional[Dict[str, DayHoursConfig]] = None

    @field_validator("slot_interval_minutes")
    @classmethod
    def validate_interval(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError(f"slot_interval_minutes must be greater than zero, got {value}")
        return value

    @field_validator("working_hours")
    @classmethod
    def validate_weekdays(
        cls, value: Optional[Dict[str, DayHoursConfig]]
    ) -> Optional[Dict[str, DayHoursConfig]]:
        """Normalise weekday keys and reject unknown ones."""
        if value is None:
            return None

        normalized: Dict[str, DayHoursConfig] = {}
        for key, hours in value.items():
            day = key.strip().lower()
            if day not in WEEKDAY_NAMES:
                raise ValueError(f"Unknown weekday '{key}', expected one of {', '.join(WEEKDAY_NAMES)}")
            normalized[day] = hours
        return normalized

    def display_name(self) -> str:
        return self.name or self.id

    def to_settings(self, defaults: DefaultsConfig) -> BusinessSettings:
        """
        Build the domain settings snapshot, filling in defaults.

        A business without working hours gets the default week; a business
        with working hours gets exactly those days (missing days are closed).
        """
        if self.working_hours is None:
            weekly_hours = WeeklyHours.default()
        else:
            weekly_hours = WeeklyHours(days={
                day: hours.to_day_hours() for day, hours in self.working_hours.items()
            })

        return BusinessSettings(
            weekly_hours=weekly_hours,
            slot_interval_minutes=self.slot_interval_minutes or defaults.slot_interval_minutes,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    businesses: List[BusinessConfig] = Field(default_factory=list)
    data_file: Optional[Path] = None

    @field_validator("businesses")
    @classmethod
    def validate_businesses(cls, value: List[BusinessConfig]) -> List[BusinessConfig]:
        """Ensure business ids are unique."""
        seen: set[str] = set()
        for business in value:
            if business.id in seen:
                raise ValueError(f"Duplicate business id detected: {business.id}")
            seen.add(business.id)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's folder.

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

        config = cls(**data)
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file
        return config

    def find_business(self, business_id: str) -> BusinessConfig | None:
        """Find a business record by its id."""
        for business in self.businesses:
            if business.id == business_id:
                return business
        return None

    def settings_for(self, business_id: str) -> BusinessSettings:
        """Settings for a business, or the defaults if it has no record."""
        business = self.find_business(business_id)
        if business is None:
            return BusinessSettings(
                weekly_hours=WeeklyHours.default(),
                slot_interval_minutes=self.defaults.slot_interval_minutes,
            )
        return business.to_settings(self.defaults)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
