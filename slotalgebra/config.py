"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.metadata import (
    MetadataKeyConfig,
    MetadataMergeConfig,
    MetadataStrategy,
    create_metadata_merger,
)
from .domain.models import EdgeStrategy, SlotOperationOptions
from .domain.rules import (
    SlotRule,
    TimeOfDay,
    allow_time_of_day_rule,
    allow_weekdays_rule,
    create_buffer_rule,
    create_time_of_day_rule,
    forbid_weekdays_rule,
    max_slots_per_day_rule,
    metadata_matcher,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "slotalgebra.yaml"


def _dedupe(values: List[int]) -> List[int]:
    # Preserve order while removing duplicates
    seen: set[int] = set()
    deduped: List[int] = []
    for value in values:
        if value not in seen:
            deduped.append(value)
            seen.add(value)
    return deduped


class OperationDefaults(BaseModel):
    """Defaults for set operations."""
    edge_strategy: EdgeStrategy = EdgeStrategy.INCLUSIVE
    min_duration_minutes: Optional[int] = None
    metadata_strategy: MetadataStrategy = MetadataStrategy.KEEP_LAST
    key_strategies: Dict[str, MetadataStrategy] = Field(default_factory=dict)

    @field_validator("min_duration_minutes")
    @classmethod
    def validate_min_duration(cls, value: Optional[int]) -> Optional[int]:
        """Ensure the minimum duration is not negative."""
        if value is not None and value < 0:
            raise ValueError("min_duration_minutes must not be negative")
        return value

    @model_validator(mode="after")
    def validate_no_custom_strategy(self) -> "OperationDefaults":
        """Custom strategies need a Python callable and cannot come from a file."""
        strategies = [self.metadata_strategy, *self.key_strategies.values()]
        if MetadataStrategy.CUSTOM in strategies:
            raise ValueError("The 'custom' metadata strategy cannot be configured from a file")
        return self

    def to_options(self) -> SlotOperationOptions:
        """Build the options bundle for set operations."""
        merger = create_metadata_merger(
            MetadataMergeConfig(
                default_strategy=self.metadata_strategy,
                key_strategies={
                    key: MetadataKeyConfig(strategy=strategy)
                    for key, strategy in self.key_strategies.items()
                },
            )
        )
        min_duration = None
        if self.min_duration_minutes is not None:
            min_duration = timedelta(minutes=self.min_duration_minutes)

        return SlotOperationOptions(
            metadata_merger=merger,
            edge_strategy=self.edge_strategy,
            min_duration=min_duration,
        )


class GeneratorDefaults(BaseModel):
    """Default settings for slot generation."""
    duration_minutes: int = 60
    stride_minutes: int = 60

    @field_validator("duration_minutes", "stride_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure duration and stride are positive."""
        if value <= 0:
            raise ValueError("duration_minutes and stride_minutes must be greater than zero")
        return value

    def get_duration(self) -> timedelta:
        return timedelta(minutes=self.duration_minutes)

    def get_stride(self) -> timedelta:
        return timedelta(minutes=self.stride_minutes)


class TimeWindow(BaseModel):
    """Clock-time window; the end may be earlier than the start to wrap past midnight."""
    start_hour: int
    end_hour: int
    start_minute: int = 0
    end_minute: int = 0

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    @field_validator("start_minute", "end_minute")
    @classmethod
    def validate_minute(cls, v: int) -> int:
        """Validate minute is between 0 and 59."""
        if not 0 <= v <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {v}")
        return v

    @model_validator(mode="after")
    def validate_end_of_day(self) -> "TimeWindow":
        """24:00 is the only valid time in hour 24."""
        for hour, minute in ((self.start_hour, self.start_minute), (self.end_hour, self.end_minute)):
            if hour == 24 and minute != 0:
                raise ValueError("24:00 is the latest time of day")
        return self

    def get_start(self) -> TimeOfDay:
        return TimeOfDay(self.start_hour, self.start_minute)

    def get_end(self) -> TimeOfDay:
        return TimeOfDay(self.end_hour, self.end_minute)


class BufferSettings(BaseModel):
    """Buffer around slots whose metadata ``match_key`` equals ``match_value``."""
    match_key: str
    match_value: Any
    before_minutes: int = 0
    after_minutes: int = 0

    @field_validator("before_minutes", "after_minutes")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        """Ensure buffer lengths are not negative."""
        if value < 0:
            raise ValueError("Buffer minutes must not be negative")
        return value


class RulesConfig(BaseModel):
    """Declarative rule set."""
    allow_weekdays: List[int] = Field(default_factory=list)
    forbid_weekdays: List[int] = Field(default_factory=list)
    block_time_ranges: List[TimeWindow] = Field(default_factory=list)
    allow_time_range: Optional[TimeWindow] = None
    buffers: List[BufferSettings] = Field(default_factory=list)
    max_slots_per_day: Optional[int] = None

    @field_validator("allow_weekdays", "forbid_weekdays")
    @classmethod
    def validate_weekdays(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(1, 8)]
        if invalid_days:
            raise ValueError(f"Weekdays must be between 1 (Monday) and 7 (Sunday), got {invalid_days}")
        return _dedupe(value)

    @field_validator("max_slots_per_day")
    @classmethod
    def validate_max_slots(cls, value: Optional[int]) -> Optional[int]:
        """Ensure the per-day cap is not negative."""
        if value is not None and value < 0:
            raise ValueError("max_slots_per_day must not be negative")
        return value

    def build_rules(self) -> List[SlotRule]:
        """Build the configured rules in a fixed order."""
        rules: List[SlotRule] = []

        if self.allow_weekdays:
            rules.append(allow_weekdays_rule(self.allow_weekdays))
        if self.forbid_weekdays:
            rules.append(forbid_weekdays_rule(self.forbid_weekdays))

        for window in self.block_time_ranges:
            rules.append(create_time_of_day_rule(window.get_start(), window.get_end()))
        if self.allow_time_range is not None:
            rules.append(
                allow_time_of_day_rule(
                    self.allow_time_range.get_start(),
                    self.allow_time_range.get_end(),
                )
            )

        for buffer in self.buffers:
            rules.append(
                create_buffer_rule(
                    metadata_matcher(buffer.match_key, buffer.match_value),
                    buffer_before=buffer.before_minutes,
                    buffer_after=buffer.after_minutes,
                )
            )

        if self.max_slots_per_day is not None:
            rules.append(max_slots_per_day_rule(self.max_slots_per_day))

        logger.debug("Built %d rule(s) from configuration", len(rules))
        return rules


class EngineConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    defaults: OperationDefaults = Field(default_factory=OperationDefaults)
    generator: GeneratorDefaults = Field(default_factory=GeneratorDefaults)
    rules: RulesConfig = Field(default_factory=RulesConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone name is known to pendulum."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "EngineConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            EngineConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a {DEFAULT_CONFIG_NAME} file."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        logger.debug("Loaded configuration from %s", config_path)
        return cls(**data)

    def to_options(self) -> SlotOperationOptions:
        return self.defaults.to_options()

    def build_rules(self) -> List[SlotRule]:
        return self.rules.build_rules()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for the config in current directory
    current_dir = Path.cwd()
    config_path = current_dir / DEFAULT_CONFIG_NAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / DEFAULT_CONFIG_NAME

    return config_path
