"""Tests for the configuration schema."""

import logging

import pytest
from pydantic import ValidationError

from bidi_detector.config.schema import (
    DEFAULT_EXCLUDES,
    DisplaySettings,
    GeneralSettings,
    ScanConfig,
    get_default_config,
    validate_config_dict,
)


class TestDefaults:
    def test_default_config(self):
        config = get_default_config()
        assert config.general.includes == ["**/*"]
        assert config.general.excludes == list(DEFAULT_EXCLUDES)
        assert config.general.jobs == 1
        assert config.display == DisplaySettings(
            show_details=True, verbose=True, ignore_invalid_data=True
        )

    def test_default_excludes_cover_binaries_and_git(self):
        assert "**/.git/*" in DEFAULT_EXCLUDES
        for ext in ("jpg", "png", "gif", "zip", "tar", "gz", "bz2", "7z", "class", "rlib", "so"):
            assert f"**/*.{ext}" in DEFAULT_EXCLUDES
        assert len(DEFAULT_EXCLUDES) == 12

    def test_defaults_are_independent(self):
        a = GeneralSettings()
        a.includes.append("x")
        assert GeneralSettings().includes == ["**/*"]


class TestValidation:
    def test_empty_pattern_rejected(self):
        with pytest.raises(ValidationError):
            GeneralSettings(includes=["src/*", ""])

    @pytest.mark.parametrize("jobs", [0, -1, 257])
    def test_jobs_bounds(self, jobs):
        with pytest.raises(ValidationError):
            GeneralSettings(jobs=jobs)

    def test_unknown_display_key(self):
        with pytest.raises(ValidationError):
            DisplaySettings(colour=True)

    def test_empty_includes_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="bidi_detector"):
            GeneralSettings(includes=[])
        assert "No include patterns" in caplog.text

    def test_validate_assignment(self):
        config = ScanConfig()
        with pytest.raises(ValidationError):
            config.general = "not a section"


class TestValidateConfigDict:
    def test_valid(self):
        config = validate_config_dict({"display": {"verbose": False}})
        assert config.display.verbose is False
        assert config.display.show_details is True

    def test_not_a_mapping(self):
        with pytest.raises(ValueError, match="expected a mapping"):
            validate_config_dict(["general"])

    def test_unknown_top_level_key(self):
        with pytest.raises(ValueError, match="unknown top-level keys"):
            validate_config_dict({"general": {}, "extra": 1})

    def test_nested_error_message(self):
        with pytest.raises(ValueError, match="Configuration validation failed"):
            validate_config_dict({"general": {"jobs": "many"}})


class TestSelectionPolicy:
    def test_policy_from_config(self):
        config = validate_config_dict({"general": {"includes": ["a/*"], "excludes": ["*.png"]}})
        policy = config.selection_policy()
        assert policy.includes == ("a/*",)
        assert policy.excludes == ("*.png",)
