"""Configuration loading with validation for bidi-detector.

Supported formats are TOML (``bidi_config.toml``) and YAML
(``bidi_config.yaml``/``.yml``). A missing configuration file is not an
error: the defaults from :mod:`bidi_detector.config.schema` apply. Content
that cannot be parsed or does not match the schema is a fatal
:class:`ConfigurationError`.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import yaml

from bidi_detector.config.schema import ScanConfig, validate_config_dict
from bidi_detector.utils.errors import ConfigurationError, ErrorCode

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES: tuple[str, ...] = (
    "bidi_config.toml",
    "bidi_config.yaml",
    "bidi_config.yml",
)

ENV_PREFIX = "BIDI_DETECTOR_"

_LIST_KEYS = frozenset({"includes", "excludes"})


class ConfigLoader:
    """Load and validate configuration files with schema validation."""

    @staticmethod
    def load_config(path: str | os.PathLike[str], env_override: bool = True) -> ScanConfig:
        """Load configuration from file and validate it.

        Args:
            path: Path to a TOML or YAML configuration file
            env_override: If True, apply ``BIDI_DETECTOR_*`` environment overrides

        Returns:
            Validated ScanConfig

        Raises:
            FileNotFoundError: If the configuration file does not exist
            ConfigurationError: If the format is unsupported, the content is
                malformed, or validation fails
        """
        path = str(path)
        if not Path(path).is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        if path.endswith(".toml"):
            config = ConfigLoader._load_toml(path)
        elif path.endswith((".yaml", ".yml")):
            config = ConfigLoader._load_yaml(path)
        else:
            raise ConfigurationError(
                ErrorCode.E801_INVALID_CONFIG_FILE,
                "Unsupported configuration file format. "
                "Only TOML (.toml) and YAML (.yaml, .yml) are supported.",
                path=path,
            )

        if env_override:
            config = ConfigLoader._apply_env_overrides(config)

        return ConfigLoader._validate(config, path)

    @staticmethod
    def load_or_default(path: str | os.PathLike[str] | None = None) -> ScanConfig:
        """Load ``path`` (or the first default file found), else use defaults.

        Environment overrides apply in both cases.
        """
        if path is None:
            path = ConfigLoader.find_config_file()
        if path is None or not Path(path).is_file():
            if path is not None:
                logger.warning("Configuration file %s not found", path)
            logger.warning("Using default configuration")
            return ConfigLoader._validate(ConfigLoader._apply_env_overrides({}), "<defaults>")
        logger.info("Loading configuration from %s", path)
        return ConfigLoader.load_config(path)

    @staticmethod
    def find_config_file(directory: str | os.PathLike[str] = os.curdir) -> str | None:
        """Return the first of DEFAULT_CONFIG_FILES present in ``directory``."""
        for name in DEFAULT_CONFIG_FILES:
            candidate = Path(directory) / name
            if candidate.is_file():
                return str(candidate)
        return None

    @staticmethod
    def _validate(config: dict[str, Any], path: str) -> ScanConfig:
        try:
            return validate_config_dict(config)
        except ValueError as e:
            raise ConfigurationError(
                ErrorCode.E802_CONFIG_VALIDATION_FAILED,
                f"Configuration validation failed for '{path}':\n{e}",
                path=path,
            ) from e

    @staticmethod
    def _load_toml(path: str) -> dict[str, Any]:
        """Load TOML configuration file."""
        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(
                ErrorCode.E801_INVALID_CONFIG_FILE,
                f"Invalid TOML syntax in '{path}': {e}",
                path=path,
            ) from e
        except OSError as e:
            raise ConfigurationError(
                ErrorCode.E801_INVALID_CONFIG_FILE,
                f"Error reading TOML file '{path}': {e}",
                path=path,
            ) from e

    @staticmethod
    def _load_yaml(path: str) -> dict[str, Any]:
        """Load YAML configuration file."""
        try:
            with open(path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                ErrorCode.E801_INVALID_CONFIG_FILE,
                f"Invalid YAML syntax in '{path}': {e}",
                path=path,
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                ErrorCode.E801_INVALID_CONFIG_FILE,
                f"Error reading YAML file '{path}': {e}",
                path=path,
            ) from e
        if not isinstance(config, dict):
            raise ConfigurationError(
                ErrorCode.E801_INVALID_CONFIG_FILE,
                f"Top level of '{path}' must be a mapping, got {type(config).__name__}",
                path=path,
            )
        return config

    @staticmethod
    def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to configuration.

        Variables are prefixed with BIDI_DETECTOR_ and use double
        underscores for nested keys. For example:
        - BIDI_DETECTOR_DISPLAY__VERBOSE=false
        - BIDI_DETECTOR_GENERAL__JOBS=4
        - BIDI_DETECTOR_GENERAL__EXCLUDES=**/*.png,**/.git/*
        """
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX):
                continue

            config_key = env_key[len(ENV_PREFIX) :].lower()
            parts = [p for p in config_key.split("__") if p]
            if not parts:
                continue

            target = config
            path_segments: list[str] = []
            for part in parts[:-1]:
                path_segments.append(part)
                existing = target.get(part)
                if existing is None:
                    target[part] = {}
                    target = target[part]
                elif isinstance(existing, dict):
                    target = existing
                else:
                    raise ConfigurationError(
                        ErrorCode.E800_CONFIG_ERROR,
                        "Environment override target is not a mapping; refusing to overwrite "
                        f"path '{'.'.join(path_segments)}' "
                        f"(existing type: {type(existing).__name__}).",
                    )

            key = parts[-1]
            if key in _LIST_KEYS:
                target[key] = [item.strip() for item in env_value.split(",") if item.strip()]
            else:
                target[key] = ConfigLoader._parse_env_value(env_value)
            logger.debug("Applied environment override %s", env_key)

        return config

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """Parse environment variable value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        return value
