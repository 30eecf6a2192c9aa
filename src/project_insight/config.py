"""Configuration loading and management for Project Insight.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.project-insight.toml)
    3. Project config (./project-insight.toml)
    4. Explicit config file
    5. Environment variables (PROJECT_INSIGHT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(scan_mode="sequential")
    >>> config.scan_mode
    'sequential'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, ProjectInsightError

Verbosity = Literal["quiet", "normal", "verbose"]
ScanMode = Literal["concurrent", "sequential"]
SeedCollisionPolicy = Literal["first_wins", "error"]

ENV_PREFIX = "PROJECT_INSIGHT_"

# Weightings accepted for a single named score in the composite
VALID_WEIGHTINGS = (1, 2, 3)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for analysis and interpretation.

    All fields have sensible defaults. Users typically override only a few
    fields via CLI flags or config file.

    Attributes:
        Scanner orchestration:
            scan_mode: "concurrent" starts every eligible scanner before awaiting
                any, so each sees the Analysis as it was before merging.
                "sequential" awaits scanners in registration order and hands each
                one the Analysis including all earlier contributions.

        Seed analysis:
            seed_collision_policy: "first_wins" silently drops parameters and
                transforms already claimed by an earlier recipe; "error" raises
                SeedCompositionError instead.

        Control goals:
            queue_enabled: Plan a queue goal in every control phase
            queue_concurrent: Concurrent goal sets admitted by the queue
            queue_fetch: Goal sets fetched per queue poll

        Preferences:
            optional_goals: Display names of goals that must be explicitly enabled
                in the preference store; all others in this list are vetoed from
                the checks phase.

        Scoring:
            score_weightings: Per-score weighting (1, 2 or 3) for the composite

        Output control:
            verbosity: Logging verbosity level
    """

    scan_mode: ScanMode = "concurrent"
    seed_collision_policy: SeedCollisionPolicy = "first_wins"

    queue_enabled: bool = False
    queue_concurrent: int = 2
    queue_fetch: int = 20

    optional_goals: list[str] = field(default_factory=list)

    score_weightings: dict[str, int] = field(default_factory=dict)

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.scan_mode not in ("concurrent", "sequential"):
            raise ValueError("scan_mode must be 'concurrent' or 'sequential'")
        if self.seed_collision_policy not in ("first_wins", "error"):
            raise ValueError("seed_collision_policy must be 'first_wins' or 'error'")

        if self.queue_concurrent < 1:
            raise ValueError("queue_concurrent must be at least 1")
        if self.queue_fetch < 1:
            raise ValueError("queue_fetch must be at least 1")

        for name, weighting in self.score_weightings.items():
            if weighting not in VALID_WEIGHTINGS:
                raise ValueError(
                    f"score weighting for '{name}' must be one of {VALID_WEIGHTINGS}, got {weighting}"
                )

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be 'quiet', 'normal' or 'verbose'")


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ProjectInsightError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".project-insight.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ProjectInsightError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "project-insight.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ProjectInsightError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ProjectInsightError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ProjectInsightError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    try:
        return AnalysisConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ProjectInsightError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from PROJECT_INSIGHT_* environment variables.

    Supported environment variables:
        PROJECT_INSIGHT_SCAN_MODE: concurrent/sequential
        PROJECT_INSIGHT_SEED_COLLISION_POLICY: first_wins/error
        PROJECT_INSIGHT_QUEUE_ENABLED: bool (true/false/1/0)
        PROJECT_INSIGHT_QUEUE_CONCURRENT: int
        PROJECT_INSIGHT_QUEUE_FETCH: int
        PROJECT_INSIGHT_OPTIONAL_GOALS: comma-separated goal display names
        PROJECT_INSIGHT_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any PROJECT_INSIGHT_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the type is not supported from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Comma-separated lists (optional_goals)
    if origin is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    # Mappings are too complex for env vars
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

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Args:
        path: Path to TOML file

    Returns:
        Parsed TOML as dict
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ProjectInsightError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
