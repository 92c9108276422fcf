"""Configuration schema and validation for bidi-detector.

The schema mirrors the ``bidi_config.toml`` layout: a ``general`` section
for file selection and a ``display`` section for reporting. Unknown keys are
rejected so that a typo in a CI configuration fails loudly instead of being
ignored.
"""

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Self

if TYPE_CHECKING:
    from bidi_detector.core.selector import SelectionPolicy

logger = logging.getLogger(__name__)

DEFAULT_INCLUDES: tuple[str, ...] = ("**/*",)

DEFAULT_EXCLUDES: tuple[str, ...] = (
    "**/*.jpg",
    "**/*.png",
    "**/*.gif",
    "**/*.zip",
    "**/*.tar",
    "**/*.gz",
    "**/*.bz2",
    "**/*.7z",
    "**/*.class",
    "**/*.rlib",
    "**/*.so",
    "**/.git/*",
)


class GeneralSettings(BaseModel):
    """Which files are scanned."""

    includes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDES),
        description="Glob patterns to enumerate, evaluated in order.",
    )
    excludes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDES),
        description="Glob patterns; a file matching any of them is never scanned.",
    )
    jobs: int = Field(
        default=1,
        ge=1,
        le=256,
        description="Number of files read and scanned concurrently.",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("includes", "excludes")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Reject empty pattern strings."""
        for pattern in v:
            if not pattern:
                raise ValueError("glob patterns must be non-empty strings")
        return v

    @model_validator(mode="after")
    def warn_no_includes(self) -> Self:
        if not self.includes:
            logger.warning("No include patterns configured; no files will be scanned.")
        return self


class DisplaySettings(BaseModel):
    """What is reported while scanning."""

    show_details: bool = Field(
        default=True,
        description="Print one diagnostic line per occurrence.",
    )
    verbose: bool = Field(
        default=True,
        description="Print a summary line for files with zero occurrences too.",
    )
    ignore_invalid_data: bool = Field(
        default=True,
        description="Silently skip files whose content is not valid UTF-8.",
    )

    model_config = ConfigDict(extra="forbid")


class ScanConfig(BaseModel):
    """Complete configuration for one scan run."""

    general: GeneralSettings = Field(
        default_factory=GeneralSettings,
        description="File selection settings.",
    )
    display: DisplaySettings = Field(
        default_factory=DisplaySettings,
        description="Reporting settings.",
    )

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "general": {
                        "includes": ["src/**/*", "tests/*.py"],
                        "excludes": ["**/*.png", "**/.git/*"],
                        "jobs": 1,
                    },
                    "display": {
                        "show_details": True,
                        "verbose": False,
                        "ignore_invalid_data": True,
                    },
                }
            ]
        },
    )

    def selection_policy(self) -> "SelectionPolicy":
        from bidi_detector.core.selector import SelectionPolicy

        return SelectionPolicy(
            includes=tuple(self.general.includes),
            excludes=tuple(self.general.excludes),
        )


def validate_config_dict(config_dict: dict[str, Any]) -> ScanConfig:
    """Validate a configuration dictionary against the schema.

    Args:
        config_dict: Parsed configuration content

    Returns:
        Validated ScanConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    if not isinstance(config_dict, dict):
        raise ValueError(
            f"Configuration validation failed: expected a mapping, got {type(config_dict).__name__}"
        )
    try:
        return ScanConfig(**config_dict)
    except Exception as e:
        err_str = str(e)
        allowed = set(ScanConfig.model_fields.keys())
        unknown = set(config_dict.keys()) - allowed
        if unknown and "Extra inputs are not permitted" in err_str:
            raise ValueError(
                f"Configuration validation failed: unknown top-level keys: {sorted(unknown)}. "
                f"Allowed keys: {sorted(allowed)}.\n"
                f"Original error: {err_str}"
            ) from e
        raise ValueError(f"Configuration validation failed: {err_str}") from e


def get_default_config() -> ScanConfig:
    """Get the default configuration."""
    return ScanConfig()
