"""
Configuration module for dirscout.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None

_FALLBACK_IGNORE_DIRS = [
    "node_modules",
    "__pycache__",
    "env",
    "venv",
    "target/dependency",
    "build/dependencies",
    "dist",
    "out",
    "bundle",
    "vendor",
    "tmp",
    "temp",
    "deps",
    "pkg",
    "Pods",
    ".*",
]

MATCH_MODES = ("segment", "root")


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section, {})
    return section_defaults.get(key, fallback)


@dataclass
class CrawlerConfig:
    """Configuration for the directory crawler."""

    timeout_ms: int = field(default_factory=lambda: _get_default("crawler", "timeout_ms", 10000))
    max_concurrency: int = field(
        default_factory=lambda: _get_default("crawler", "max_concurrency", 64)
    )
    cache_max_entries: int = field(
        default_factory=lambda: _get_default("crawler", "cache_max_entries", 100000)
    )
    follow_symlinks: bool = field(
        default_factory=lambda: _get_default("crawler", "follow_symlinks", True)
    )
    match_mode: str = field(default_factory=lambda: _get_default("crawler", "match_mode", "segment"))
    ignore_file: str = field(
        default_factory=lambda: _get_default("crawler", "ignore_file", ".gitignore")
    )
    default_ignore_dirs: list[str] = field(
        default_factory=lambda: list(
            _get_default("crawler", "default_ignore_dirs", _FALLBACK_IGNORE_DIRS)
        )
    )

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ValueError: If a numeric setting is not positive or match_mode is unknown
        """
        for name in ("timeout_ms", "max_concurrency", "cache_max_entries"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"crawler.{name} must be a positive integer, got {value!r}")
        if self.match_mode not in MATCH_MODES:
            raise ValueError(
                f"Invalid match_mode '{self.match_mode}', expected one of {', '.join(MATCH_MODES)}"
            )


@dataclass
class ListingConfig:
    """Configuration for the list_files entry point."""

    default_limit: int = field(default_factory=lambda: _get_default("listing", "default_limit", 200))


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "WARNING"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


@dataclass
class DirscoutConfig:
    """Main configuration class for dirscout."""

    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    listing: ListingConfig = field(default_factory=ListingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "DirscoutConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)

        Returns:
            DirscoutConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported, or the file cannot
                be read or parsed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        if path.suffix not in (".yaml", ".yml", ".json"):
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ValueError(f"Cannot read configuration file {path}: {e}") from e

        try:
            if path.suffix == ".json":
                data = json.loads(content) if content.strip() else {}
            else:
                data = yaml.safe_load(content) or {}
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Cannot parse configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "DirscoutConfig":
        """Create DirscoutConfig from a dictionary."""
        config = cls()

        if "crawler" in data:
            config.crawler = CrawlerConfig(**data["crawler"])
        if "listing" in data:
            config.listing = ListingConfig(**data["listing"])
        if "logging" in data:
            config.logging = LoggingConfig(**data["logging"])

        return config

    def apply_env_overrides(self) -> "DirscoutConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: DIRSCOUT_<SECTION>_<KEY>
        Examples:
            - DIRSCOUT_CRAWLER_TIMEOUT_MS
            - DIRSCOUT_CRAWLER_MATCH_MODE
            - DIRSCOUT_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            # Crawler config
            "DIRSCOUT_CRAWLER_TIMEOUT_MS": ("crawler", "timeout_ms", int),
            "DIRSCOUT_CRAWLER_MAX_CONCURRENCY": ("crawler", "max_concurrency", int),
            "DIRSCOUT_CRAWLER_CACHE_MAX_ENTRIES": ("crawler", "cache_max_entries", int),
            "DIRSCOUT_CRAWLER_FOLLOW_SYMLINKS": ("crawler", "follow_symlinks", _parse_bool),
            "DIRSCOUT_CRAWLER_MATCH_MODE": ("crawler", "match_mode", _parse_match_mode),
            "DIRSCOUT_CRAWLER_IGNORE_FILE": ("crawler", "ignore_file", str),
            # Listing config
            "DIRSCOUT_LISTING_DEFAULT_LIMIT": ("listing", "default_limit", int),
            # Logging config
            "DIRSCOUT_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                section_obj = getattr(self, section)
                setattr(section_obj, key, converter(value))

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Args:
            path: Path to save the configuration (.yaml, .yml, or .json)

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def _parse_match_mode(value: str) -> str:
    mode = value.strip().lower()
    if mode not in MATCH_MODES:
        raise ValueError(f"Invalid match mode '{value}', expected one of {', '.join(MATCH_MODES)}")
    return mode


def load_config(
    config_path: Optional[Path | str] = None, apply_env: bool = True
) -> DirscoutConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        DirscoutConfig instance

    Raises:
        ValueError: If the file or an environment override holds an invalid value
    """
    if config_path:
        config = DirscoutConfig.from_file(config_path)
    else:
        config = DirscoutConfig()

    if apply_env:
        config.apply_env_overrides()
        # Overrides are assigned after construction
        config.crawler.validate()

    return config
