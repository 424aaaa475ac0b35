"""Configuration loading and management for Code Pulse.

Configuration sources are merged in priority order:
    1. Defaults (defined in TrackingConfig)
    2. Global config (~/.code-pulse.toml)
    3. Project config (./code-pulse.toml)
    4. Explicit config file
    5. Environment variables (CODE_PULSE_* prefix)
    6. Keyword overrides (typically from CLI flags)

Example:
    >>> config = load_config(debounce_ms=250)
    >>> config.debounce_seconds
    0.25
    >>> config.is_tracked("/src/app.ts", "ts")
    True
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .metrics.recommendations import resolve_threshold


@dataclass(frozen=True)
class TrackingConfig:
    """Settings for metric tracking, analysis scheduling and caching.

    Attributes:
        Tracking policy:
            enable_metric_tracking: Master switch for the inclusion policy
            excluded_languages: Language tags (file extensions) never tracked
            enable_detailed_logging: Log metrics + recommendations after each save

        Alerts:
            complexity_threshold: Alert threshold for languages without an override
            language_complexity_thresholds: Per-language alert thresholds

        Scheduling:
            debounce_ms: Quiet period before a change triggers light analysis
            file_debounce_ms: Quiet period of the single-purpose file debouncer
            idle_threshold_minutes: Activity gap counted as idle time
            idle_check_seconds: Period of the background idle tick
            tracking_interval_minutes: Period of the scheduler's auto-flush

        Analysis:
            deep_analysis_byte_limit: Content size above which typing uses the quick heuristic
            max_traversal_nodes: Node budget for a single syntax-tree walk

        Caching:
            cache_max_size: Maximum live entries in the metric cache
            cache_ttl_hours: Age after which a cached entry is treated as absent

        Storage:
            storage_path: Location of the JSON snapshot file
            retention_days: Daily totals older than this are pruned
    """

    # Tracking policy
    enable_metric_tracking: bool = True
    excluded_languages: list[str] = field(default_factory=lambda: ["json", "lock"])
    enable_detailed_logging: bool = False

    # Alerts
    complexity_threshold: int = 10
    language_complexity_thresholds: dict[str, int] = field(
        default_factory=lambda: {"typescript": 15, "javascript": 12, "python": 20}
    )

    # Scheduling
    debounce_ms: int = 500
    file_debounce_ms: int = 300
    idle_threshold_minutes: float = 5.0
    idle_check_seconds: float = 60.0
    tracking_interval_minutes: float = 30.0

    # Analysis
    deep_analysis_byte_limit: int = 50_000
    max_traversal_nodes: int = 200_000

    # Caching
    cache_max_size: int = 500
    cache_ttl_hours: float = 24.0

    # Storage
    storage_path: str = ".code-pulse/metrics.json"
    retention_days: int = 90

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.complexity_threshold < 1:
            raise InvalidConfigError(
                "complexity_threshold", self.complexity_threshold, "must be at least 1"
            )
        for lang, threshold in self.language_complexity_thresholds.items():
            if threshold < 1:
                raise InvalidConfigError(
                    f"language_complexity_thresholds.{lang}", threshold, "must be at least 1"
                )

        if self.debounce_ms < 0:
            raise InvalidConfigError("debounce_ms", self.debounce_ms, "must be non-negative")
        if self.file_debounce_ms < 0:
            raise InvalidConfigError(
                "file_debounce_ms", self.file_debounce_ms, "must be non-negative"
            )
        if self.idle_threshold_minutes <= 0:
            raise InvalidConfigError(
                "idle_threshold_minutes", self.idle_threshold_minutes, "must be positive"
            )
        if self.idle_check_seconds <= 0:
            raise InvalidConfigError(
                "idle_check_seconds", self.idle_check_seconds, "must be positive"
            )
        if self.tracking_interval_minutes <= 0:
            raise InvalidConfigError(
                "tracking_interval_minutes", self.tracking_interval_minutes, "must be positive"
            )

        if self.deep_analysis_byte_limit < 0:
            raise InvalidConfigError(
                "deep_analysis_byte_limit", self.deep_analysis_byte_limit, "must be non-negative"
            )
        if self.max_traversal_nodes < 1:
            raise InvalidConfigError(
                "max_traversal_nodes", self.max_traversal_nodes, "must be at least 1"
            )

        if self.cache_max_size < 1:
            raise InvalidConfigError("cache_max_size", self.cache_max_size, "must be at least 1")
        if self.cache_ttl_hours <= 0:
            raise InvalidConfigError("cache_ttl_hours", self.cache_ttl_hours, "must be positive")

        if self.retention_days < 1:
            raise InvalidConfigError("retention_days", self.retention_days, "must be at least 1")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @property
    def file_debounce_seconds(self) -> float:
        return self.file_debounce_ms / 1000

    @property
    def idle_threshold_seconds(self) -> float:
        return self.idle_threshold_minutes * 60

    @property
    def tracking_interval_seconds(self) -> float:
        return self.tracking_interval_minutes * 60

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 3600

    def is_tracked(self, identity: str, language: str) -> bool:
        """Default inclusion policy: tracking enabled and language not excluded."""
        if not self.enable_metric_tracking or not identity:
            return False
        excluded = {lang.lower() for lang in self.excluded_languages}
        return language.lower() not in excluded

    def threshold_for(self, language: str) -> int:
        """Alert threshold for a language tag, falling back to complexity_threshold."""
        return resolve_threshold(
            language, self.language_complexity_thresholds, self.complexity_threshold
        )


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> TrackingConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated TrackingConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing, or a value
            fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".code-pulse.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    project_config = Path.cwd() / "code-pulse.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

    merged.update(_load_env_vars())
    merged.update(overrides)

    try:
        return TrackingConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODE_PULSE_* environment variables.

    Examples:
        CODE_PULSE_ENABLE_METRIC_TRACKING=false
        CODE_PULSE_EXCLUDED_LANGUAGES=json,lock,md
        CODE_PULSE_DEBOUNCE_MS=750
        CODE_PULSE_CACHE_TTL_HOURS=12
    """
    type_hints = get_type_hints(TrackingConfig)

    result: dict[str, Any] = {}

    for field_name in TrackingConfig.__dataclass_fields__:
        env_key = f"CODE_PULSE_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type.

    Returns None for types that cannot be expressed as a single variable.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Comma-separated lists (excluded_languages)
    if origin is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    # Mappings only come from TOML
    if origin is dict:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_section(path: Path) -> dict[str, Any]:
    """Load a TOML file, preferring a [code-pulse] table when present."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("code-pulse", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file '{path}': [code-pulse] must be a table")
    return dict(section)
