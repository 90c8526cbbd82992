"""
Tests for configuration loading.
"""

from datetime import timedelta

import pendulum
import pytest
from pydantic import ValidationError

from slotalgebra.config import (
    BufferSettings,
    EngineConfig,
    GeneratorDefaults,
    OperationDefaults,
    RulesConfig,
    TimeWindow,
)
from slotalgebra.domain.exceptions import MetadataConflictError
from slotalgebra.domain.models import EdgeStrategy, Slot

CONFIG_YAML = """
timezone: Europe/Berlin
defaults:
  edge_strategy: exclusive
  min_duration_minutes: 30
  metadata_strategy: combine
  key_strategies:
    room: error
generator:
  duration_minutes: 30
  stride_minutes: 15
rules:
  forbid_weekdays: [6, 7, 6]
  block_time_ranges:
    - start_hour: 12
      end_hour: 13
  allow_time_range:
    start_hour: 8
    end_hour: 18
  buffers:
    - match_key: type
      match_value: flight
      before_minutes: 60
  max_slots_per_day: 4
"""


def _slot(start: str, end: str, **metadata) -> Slot:
    return Slot(
        start=pendulum.parse(start, tz="UTC"),
        end=pendulum.parse(end, tz="UTC"),
        metadata=metadata,
    )


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.timezone == "UTC"
        assert config.defaults.edge_strategy is EdgeStrategy.INCLUSIVE
        assert config.generator.get_duration() == timedelta(hours=1)
        assert config.build_rules() == []

    def test_load_from_yaml(self, tmp_path):
        config_file = tmp_path / "slotalgebra.yaml"
        config_file.write_text(CONFIG_YAML, encoding="utf-8")

        config = EngineConfig.load_from_yaml(config_file)

        assert config.timezone == "Europe/Berlin"
        assert config.defaults.edge_strategy is EdgeStrategy.EXCLUSIVE
        assert config.generator.get_stride() == timedelta(minutes=15)
        assert config.rules.forbid_weekdays == [6, 7]
        assert len(config.build_rules()) == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            EngineConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("timezone: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            EngineConfig.load_from_yaml(config_file)

    def test_root_must_be_mapping(self, tmp_path):
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping at the root level"):
            EngineConfig.load_from_yaml(config_file)

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert EngineConfig.load_from_yaml(config_file) == EngineConfig()

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            EngineConfig(timezone="Mars/Olympus_Mons")


class TestOperationDefaults:
    """Tests for OperationDefaults."""

    def test_to_options(self):
        options = OperationDefaults(
            edge_strategy="exclusive",
            min_duration_minutes=45,
            metadata_strategy="keep_first",
        ).to_options()

        assert options.edge_strategy is EdgeStrategy.EXCLUSIVE
        assert options.min_duration == timedelta(minutes=45)
        assert options.metadata_merger({"owner": "alice"}, {"owner": "bob"}) == {"owner": "alice"}

    def test_key_strategies_reach_merger(self):
        options = OperationDefaults(key_strategies={"room": "error"}).to_options()

        assert options.min_duration is None
        with pytest.raises(MetadataConflictError):
            options.metadata_merger({"room": "1"}, {"room": "2"})

    def test_negative_min_duration(self):
        with pytest.raises(ValidationError):
            OperationDefaults(min_duration_minutes=-1)

    def test_custom_strategy_rejected(self):
        with pytest.raises(ValidationError, match="custom"):
            OperationDefaults(metadata_strategy="custom")
        with pytest.raises(ValidationError, match="custom"):
            OperationDefaults(key_strategies={"room": "custom"})

    def test_unknown_edge_strategy(self):
        with pytest.raises(ValidationError):
            OperationDefaults(edge_strategy="sometimes")


class TestGeneratorDefaults:

    @pytest.mark.parametrize("field", ["duration_minutes", "stride_minutes"])
    def test_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            GeneratorDefaults(**{field: 0})


class TestTimeWindow:
    """Tests for TimeWindow."""

    def test_valid_window(self):
        window = TimeWindow(start_hour=22, end_hour=6, start_minute=30)

        assert window.get_start().seconds == 22 * 3600 + 30 * 60
        assert window.get_end().hour == 6

    def test_end_of_day(self):
        assert TimeWindow(start_hour=18, end_hour=24).get_end().hour == 24

    @pytest.mark.parametrize(
        "values",
        [
            {"start_hour": 25, "end_hour": 6},
            {"start_hour": 9, "end_hour": 17, "end_minute": 60},
            {"start_hour": 9, "end_hour": 24, "end_minute": 30},
        ],
    )
    def test_invalid_window(self, values):
        with pytest.raises(ValidationError):
            TimeWindow(**values)


class TestRulesConfig:
    """Tests for RulesConfig."""

    def test_invalid_weekdays(self):
        with pytest.raises(ValidationError, match="Weekdays must be between 1"):
            RulesConfig(allow_weekdays=[0, 1])

    def test_negative_buffer(self):
        with pytest.raises(ValidationError):
            BufferSettings(match_key="type", match_value="flight", before_minutes=-10)

    def test_negative_max_slots(self):
        with pytest.raises(ValidationError):
            RulesConfig(max_slots_per_day=-1)

    def test_built_rules_forbid_configured_slots(self):
        rules = RulesConfig(
            forbid_weekdays=[6, 7],
            block_time_ranges=[TimeWindow(start_hour=12, end_hour=13)],
            buffers=[BufferSettings(match_key="type", match_value="flight", before_minutes=60)],
        ).build_rules()

        saturday = _slot("2024-03-23 10:00", "2024-03-23 11:00")
        lunch = _slot("2024-03-18 12:00", "2024-03-18 12:30")
        flight = _slot("2024-03-18 15:00", "2024-03-18 17:00", type="flight")
        free = _slot("2024-03-18 09:00", "2024-03-18 10:00")

        forbidden = [slot for rule in rules for slot in rule([saturday, lunch, flight, free])]

        assert saturday in forbidden
        assert lunch in forbidden
        assert free not in forbidden
        buffers = [slot for slot in forbidden if slot.metadata.get("is_buffer")]
        assert len(buffers) == 1
        assert buffers[0].start == pendulum.parse("2024-03-18 14:00", tz="UTC")
