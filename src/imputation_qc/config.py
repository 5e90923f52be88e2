"""Configuration file support for imputation-qc."""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .models import InclusionConfig
from .parsers.info_file import DEFAULT_CHUNK_SIZE
from .selector import DEFAULT_FILE_PATTERN

logger = logging.getLogger(__name__)

CONFIG_SECTION = "imputation_qc"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

INCLUSION_FIELDS = {"maf_cutoff", "rsq_common", "rsq_rare"}

PIPELINE_FIELDS = {"sample_size", "workers", "chunk_size", "seed", "file_pattern"}

OTHER_FIELDS = {"chromosomes", "log_level"}


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for one summarization run."""

    inclusion: InclusionConfig = field(default_factory=InclusionConfig)
    sample_size: int = 10_000
    workers: int = 1
    chunk_size: int = DEFAULT_CHUNK_SIZE
    seed: int | None = None
    file_pattern: str = DEFAULT_FILE_PATTERN

    @property
    def parallel(self) -> bool:
        return self.workers > 1


def _require_number(config_dict: dict[str, Any], key: str, low: float, high: float) -> None:
    value = config_dict[key]
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigValidationError(f"{key} must be a number, got {type(value).__name__}")
    if not low <= value <= high:
        raise ConfigValidationError(f"{key} must be between {low} and {high}, got {value}")


def _require_int(config_dict: dict[str, Any], key: str, minimum: int) -> None:
    value = config_dict[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(f"{key} must be an integer, got {type(value).__name__}")
    if value < minimum:
        qualifier = "positive" if minimum == 1 else f"at least {minimum}"
        raise ConfigValidationError(f"{key} must be {qualifier}, got {value}")


def validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Raises:
        ConfigValidationError: If any configuration value is invalid.
    """
    if "maf_cutoff" in config_dict:
        _require_number(config_dict, "maf_cutoff", 0.0, 0.5)

    if "rsq_common" in config_dict:
        _require_number(config_dict, "rsq_common", 0.0, 1.0)

    if config_dict.get("rsq_rare") is not None:
        _require_number(config_dict, "rsq_rare", 0.0, 1.0)

    if "sample_size" in config_dict:
        _require_int(config_dict, "sample_size", 0)

    if "workers" in config_dict:
        _require_int(config_dict, "workers", 1)

    if "chunk_size" in config_dict:
        _require_int(config_dict, "chunk_size", 1)

    if config_dict.get("seed") is not None:
        _require_int(config_dict, "seed", 0)

    for key in ("file_pattern", "chromosomes"):
        if key in config_dict and not isinstance(config_dict[key], str):
            raise ConfigValidationError(
                f"{key} must be a string, got {type(config_dict[key]).__name__}"
            )

    if "log_level" in config_dict:
        log_level = config_dict["log_level"]
        if not isinstance(log_level, str):
            raise ConfigValidationError(
                f"log_level must be a string, got {type(log_level).__name__}"
            )
        if log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigValidationError(
                f"log_level must be one of {VALID_LOG_LEVELS}, got '{log_level}'"
            )


def build_config(config_dict: dict[str, Any]) -> PipelineConfig:
    """Build a PipelineConfig from a flat dict of validated settings."""
    validate_config(config_dict)

    unknown = set(config_dict) - INCLUSION_FIELDS - PIPELINE_FIELDS - OTHER_FIELDS
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(sorted(unknown)))

    inclusion = InclusionConfig(
        **{k: v for k, v in config_dict.items() if k in INCLUSION_FIELDS}
    )
    return PipelineConfig(
        inclusion=inclusion,
        **{k: v for k, v in config_dict.items() if k in PIPELINE_FIELDS},
    )


def read_config_file(config_path: Path) -> dict[str, Any]:
    """Read the [imputation_qc] table of a TOML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigValidationError: If the file is not valid TOML.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigValidationError(f"Invalid TOML in {config_path}: {e}") from e

    return dict(toml_data.get(CONFIG_SECTION, {}))


def load_config(config_path: Path, overrides: dict[str, Any] | None = None) -> PipelineConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML configuration file.
        overrides: Optional dict of values to override loaded config.

    Returns:
        PipelineConfig instance with loaded values.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigValidationError: If any configuration value is invalid.
    """
    config_dict = read_config_file(config_path)

    if overrides:
        config_dict.update(overrides)

    return build_config(config_dict)
