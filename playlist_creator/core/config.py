"""
Configuration management for playlist-creator.

Reads config.yaml into frozen dataclasses, applying defaults for every
optional value and rejecting malformed ones with ConfigError.

Sections:
    - Matching thresholds (auto-selection, minimum confidence, review batch
      thresholds)
    - Catalog search settings (delay between requests, storefront, limits)
    - Output directory for logs, the request database and exported playlists

Configuration File Location:
    The config.yaml file is looked up in the current working directory
    unless an explicit path is given (CLI --config).

Example config.yaml:
    matching:
      auto_select_threshold: 0.9
      minimum_confidence: 0.0
      high_confidence_threshold: 0.9
      low_confidence_threshold: 0.5

    search:
      rate_limit_delay: 0.1
      country: "US"
      limit: 25
      timeout: 10

    output:
      directory: "~/Music/PlaylistCreator"
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from playlist_creator.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_AUTO_SELECT_THRESHOLD = 0.9
DEFAULT_MINIMUM_CONFIDENCE = 0.0
DEFAULT_HIGH_CONFIDENCE_THRESHOLD = 0.9
DEFAULT_LOW_CONFIDENCE_THRESHOLD = 0.5

DEFAULT_RATE_LIMIT_DELAY = 0.1
DEFAULT_COUNTRY = "US"
DEFAULT_SEARCH_LIMIT = 25
DEFAULT_SEARCH_TIMEOUT = 10.0


@dataclass(frozen=True)
class MatchingConfig:
    """
    Match classification thresholds.

    Attributes:
        auto_select_threshold: Matches at or above this confidence skip review.
        minimum_confidence: Lowest confidence for a search top match.
        high_confidence_threshold: Default for the review "accept high" batch.
        low_confidence_threshold: Default for the review "reject low" batch.

    Values are used as given: a threshold above 1.0 simply means nothing
    is auto-selected.
    """
    auto_select_threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD
    minimum_confidence: float = DEFAULT_MINIMUM_CONFIDENCE
    high_confidence_threshold: float = DEFAULT_HIGH_CONFIDENCE_THRESHOLD
    low_confidence_threshold: float = DEFAULT_LOW_CONFIDENCE_THRESHOLD


@dataclass(frozen=True)
class SearchConfig:
    """
    Catalog search configuration.

    Attributes:
        rate_limit_delay: Seconds to wait between catalog requests in a batch.
        country: Two-letter storefront code for the iTunes Search API.
        limit: Maximum candidates requested per query.
        timeout: HTTP timeout in seconds.
    """
    rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY
    country: str = DEFAULT_COUNTRY
    limit: int = DEFAULT_SEARCH_LIMIT
    timeout: float = DEFAULT_SEARCH_TIMEOUT


@dataclass(frozen=True)
class OutputConfig:
    """
    Output directory configuration.

    Attributes:
        directory: Absolute path where logs, the request database and
                   exported playlists are written. ~ is expanded.
                   The directory is created on first use.
    """
    directory: Path


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable.

    Example:
        config = load_config()
        print(f"Auto-select at {config.matching.auto_select_threshold:.0%}")
        print(f"Writing to: {config.output.directory}")
    """
    matching: MatchingConfig
    search: SearchConfig
    output: OutputConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the config file is not found, has invalid YAML syntax,
                     is missing the output section, or contains invalid values.

    Behavior:
        1. Locate config file (explicit path or CWD/config.yaml)
        2. Read and parse YAML content
        3. Validate structure (output section required, others optional)
        4. Parse each section, applying defaults
        5. Create and return frozen Config object
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return parse_config(raw_config)


def parse_config(raw_config: dict[str, Any]) -> Config:
    """
    Build a Config from an already-parsed dictionary.

    Raises:
        ConfigError: If a section or value is invalid.
    """
    _validate_config(raw_config)

    return Config(
        matching=_parse_matching_config(_optional_section(raw_config, "matching")),
        search=_parse_search_config(_optional_section(raw_config, "search")),
        output=_parse_output_config(raw_config["output"])
    )


def _validate_config(raw_config: dict[str, Any]) -> None:
    if "output" not in raw_config:
        raise ConfigError(
            "Missing required section: 'output'",
            details={"missing_section": "output"}
        )

    for section in ("matching", "search", "output"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )

    if raw_config["output"] is None:
        raise ConfigError(
            "Section 'output' must be a dictionary",
            details={"section": "output"}
        )


def _optional_section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    return raw_config.get(name) or {}


def _parse_number(section: dict[str, Any], section_name: str, key: str, default: float) -> float:
    """
    Read a numeric field, falling back to default when absent.

    bool is rejected even though it is an int subclass: "true" in YAML is
    almost certainly a typo for a threshold.
    """
    raw = section.get(key)
    if raw is None:
        return default

    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ConfigError(
            f"'{section_name}.{key}' must be a number",
            details={"field": f"{section_name}.{key}", "value": raw}
        )
    return float(raw)


def _parse_matching_config(matching_section: dict[str, Any]) -> MatchingConfig:
    return MatchingConfig(
        auto_select_threshold=_parse_number(
            matching_section, "matching", "auto_select_threshold",
            DEFAULT_AUTO_SELECT_THRESHOLD
        ),
        minimum_confidence=_parse_number(
            matching_section, "matching", "minimum_confidence",
            DEFAULT_MINIMUM_CONFIDENCE
        ),
        high_confidence_threshold=_parse_number(
            matching_section, "matching", "high_confidence_threshold",
            DEFAULT_HIGH_CONFIDENCE_THRESHOLD
        ),
        low_confidence_threshold=_parse_number(
            matching_section, "matching", "low_confidence_threshold",
            DEFAULT_LOW_CONFIDENCE_THRESHOLD
        ),
    )


def _parse_search_config(search_section: dict[str, Any]) -> SearchConfig:
    """
    Parse and validate the search configuration section.

    Raises:
        ConfigError: If rate_limit_delay or timeout is negative, limit is
                     not a positive integer, or country is not a two-letter
                     string.
    """
    delay = _parse_number(search_section, "search", "rate_limit_delay", DEFAULT_RATE_LIMIT_DELAY)
    if delay < 0:
        raise ConfigError(
            "'search.rate_limit_delay' must not be negative",
            details={"field": "search.rate_limit_delay", "value": delay}
        )

    timeout = _parse_number(search_section, "search", "timeout", DEFAULT_SEARCH_TIMEOUT)
    if timeout < 0:
        raise ConfigError(
            "'search.timeout' must not be negative",
            details={"field": "search.timeout", "value": timeout}
        )

    limit = search_section.get("limit", DEFAULT_SEARCH_LIMIT)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ConfigError(
            "'search.limit' must be a positive integer",
            details={"field": "search.limit", "value": limit}
        )

    country = search_section.get("country", DEFAULT_COUNTRY)
    if not isinstance(country, str) or len(country.strip()) != 2 or not country.strip().isalpha():
        raise ConfigError(
            "'search.country' must be a two-letter country code",
            details={"field": "search.country", "value": country}
        )

    return SearchConfig(
        rate_limit_delay=delay,
        country=country.strip().upper(),
        limit=limit,
        timeout=timeout
    )


def _parse_output_config(output_section: dict[str, Any]) -> OutputConfig:
    """
    Parse and validate the output configuration section.

    Expands ~ to home directory and converts to absolute Path.
    Does NOT create the directory.
    """
    directory = output_section.get("directory", "")

    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'output.directory' must be a non-empty string",
            details={"field": "output.directory"}
        )

    return OutputConfig(directory=Path(directory.strip()).expanduser().resolve())
