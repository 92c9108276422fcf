"""Configuration schema and loading for bidi-detector."""

from .loader import DEFAULT_CONFIG_FILES, ConfigLoader
from .schema import (
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDES,
    DisplaySettings,
    GeneralSettings,
    ScanConfig,
    get_default_config,
    validate_config_dict,
)

__all__ = [
    "DEFAULT_CONFIG_FILES",
    "DEFAULT_EXCLUDES",
    "DEFAULT_INCLUDES",
    "ConfigLoader",
    "DisplaySettings",
    "GeneralSettings",
    "ScanConfig",
    "get_default_config",
    "validate_config_dict",
]
