"""
Metadata merge strategies.

Every operation that folds two slots into one asks a ``MetadataMerger`` what
the combined metadata should be. The mergers here are plain functions, so a
caller can pass one of the named constants, build one from a
``MetadataMergeConfig``, or hand in any callable of its own.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from .exceptions import MetadataConflictError
from .models import Metadata, MetadataMerger


class MetadataStrategy(str, Enum):
    KEEP_FIRST = "keep_first"
    KEEP_LAST = "keep_last"
    COMBINE = "combine"
    ERROR = "error"
    CUSTOM = "custom"


ValueMerger = Callable[[Any, Any], Any]


@dataclass
class MetadataKeyConfig:
    """Strategy for a single metadata key."""
    strategy: MetadataStrategy
    merge: Optional[ValueMerger] = None

    def __post_init__(self):
        self.strategy = MetadataStrategy(self.strategy)


@dataclass
class MetadataMergeConfig:
    """
    Configuration for building a merger.

    ``default_strategy`` applies to every key without an entry in
    ``key_strategies``. With ``CUSTOM`` as the default, ``custom_merge``
    receives both whole mappings and its result is the starting point for
    the per-key strategies.
    """
    default_strategy: MetadataStrategy = MetadataStrategy.KEEP_LAST
    custom_merge: Optional[MetadataMerger] = None
    key_strategies: Dict[str, MetadataKeyConfig] = field(default_factory=dict)

    def __post_init__(self):
        self.default_strategy = MetadataStrategy(self.default_strategy)
        if self.default_strategy is MetadataStrategy.CUSTOM and self.custom_merge is None:
            raise ValueError("custom_merge is required when default_strategy is 'custom'")
        for key, key_config in self.key_strategies.items():
            if key_config.strategy is MetadataStrategy.CUSTOM and key_config.merge is None:
                raise ValueError(f"Key '{key}' uses the custom strategy but has no merge function")


def keep_first_metadata(first: Mapping[str, Any], second: Mapping[str, Any]) -> Metadata:
    """Keys of the first mapping win on conflict."""
    return {**second, **first}


def keep_last_metadata(first: Mapping[str, Any], second: Mapping[str, Any]) -> Metadata:
    """Keys of the second mapping win on conflict."""
    return {**first, **second}


def combine_values(first: Any, second: Any) -> Any:
    """
    Combine two values for the same key.

    Lists are concatenated, mappings merged (right-biased), equal values kept
    once; anything else is collected into a two-element list.
    """
    if isinstance(first, list) and isinstance(second, list):
        return first + second
    if isinstance(first, Mapping) and isinstance(second, Mapping):
        return {**first, **second}
    if first == second:
        return first
    return [first, second]


def combine_metadata(first: Mapping[str, Any], second: Mapping[str, Any]) -> Metadata:
    """Union of keys; values present on both sides go through ``combine_values``."""
    merged = dict(first)
    for key, value in second.items():
        merged[key] = combine_values(merged[key], value) if key in merged else value
    return merged


def error_on_conflict(first: Mapping[str, Any], second: Mapping[str, Any]) -> Metadata:
    """Union of keys; raises ``MetadataConflictError`` if a shared key disagrees."""
    merged = dict(first)
    for key, value in second.items():
        if key in merged and merged[key] != value:
            raise MetadataConflictError(
                f"Conflicting metadata for key '{key}': {merged[key]!r} != {value!r}"
            )
        merged[key] = value
    return merged


DEFAULT_METADATA_MERGER: MetadataMerger = keep_last_metadata

_WHOLE_MAPPING_MERGERS: Dict[MetadataStrategy, MetadataMerger] = {
    MetadataStrategy.KEEP_FIRST: keep_first_metadata,
    MetadataStrategy.KEEP_LAST: keep_last_metadata,
    MetadataStrategy.COMBINE: combine_metadata,
    MetadataStrategy.ERROR: error_on_conflict,
}


def _merge_key(key: str, config: MetadataKeyConfig, first: Mapping[str, Any], second: Mapping[str, Any]):
    if key not in first:
        return second[key]
    if key not in second:
        return first[key]

    a, b = first[key], second[key]
    if config.strategy is MetadataStrategy.KEEP_FIRST:
        return a
    if config.strategy is MetadataStrategy.KEEP_LAST:
        return b
    if config.strategy is MetadataStrategy.COMBINE:
        return combine_values(a, b)
    if config.strategy is MetadataStrategy.ERROR:
        if a != b:
            raise MetadataConflictError(f"Conflicting metadata for key '{key}': {a!r} != {b!r}")
        return a
    return config.merge(a, b)


def create_metadata_merger(config: MetadataMergeConfig) -> MetadataMerger:
    """
    Build a merger from a ``MetadataMergeConfig``.

    Keys listed in ``key_strategies`` are resolved individually; a key that
    only exists on one side is always carried over unchanged.
    """
    if config.default_strategy is MetadataStrategy.CUSTOM:
        base_merger = config.custom_merge
    else:
        base_merger = _WHOLE_MAPPING_MERGERS[config.default_strategy]

    def merger(first: Mapping[str, Any], second: Mapping[str, Any]) -> Metadata:
        # Keys with their own strategy are taken out of the default pass.
        first_rest = {k: v for k, v in first.items() if k not in config.key_strategies}
        second_rest = {k: v for k, v in second.items() if k not in config.key_strategies}
        merged = dict(base_merger(first_rest, second_rest))

        for key, key_config in config.key_strategies.items():
            if key in first or key in second:
                merged[key] = _merge_key(key, key_config, first, second)
        return merged

    return merger
