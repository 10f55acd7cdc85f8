"""Unit tests for configuration loading and saving."""

from pathlib import Path

import pytest
from fileadopt.core.config import (
    AdoptionConfig,
    get_default_config,
    load_config,
    load_config_or_default,
    save_config,
)
from fileadopt.errors import ConfigError, ConfigNotFoundError, ConfigParseError
from pydantic import ValidationError


class TestAdoptionConfig:
    """Tests for the AdoptionConfig model."""

    def test_defaults(self) -> None:
        config = get_default_config()

        assert config.patterns == ["css/*", "js/*", "php/*", "styles/*"]
        assert config.items_per_run == 20
        assert config.directory_depth == 3
        assert config.enable_adoption is False
        assert config.ignore_symlinks is False

    def test_items_per_run_bounds(self) -> None:
        with pytest.raises(ValidationError):
            AdoptionConfig(items_per_run=0)
        with pytest.raises(ValidationError):
            AdoptionConfig(items_per_run=501)

    def test_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValidationError):
            AdoptionConfig.model_validate({"unknown": 1})

    def test_rejects_absolute_pattern(self) -> None:
        with pytest.raises(ValidationError):
            AdoptionConfig(ignore_patterns="/etc/*")

    def test_assignment_is_validated(self) -> None:
        config = AdoptionConfig()
        with pytest.raises(ValidationError):
            config.items_per_run = 1000


class TestLoadSave:
    """Tests for TOML persistence."""

    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        config = AdoptionConfig(
            public_root=tmp_path / "files",
            ignore_patterns="a/*\nb/*",
            items_per_run=100,
        )

        save_config(config, path)

        assert load_config(path) == config

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path) -> None:
        assert load_config_or_default(tmp_path / "missing.toml") == get_default_config()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("not = [valid")

        with pytest.raises(ConfigParseError):
            load_config(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("items_per_run = 0\n")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_pattern_array_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('ignore_patterns = ["css/*", "tmp/*"]\n')

        assert load_config(path).patterns == ["css/*", "tmp/*"]

    def test_save_leaves_no_temp_files(self, tmp_path: Path) -> None:
        save_config(get_default_config(), tmp_path / "config.toml")

        assert [p.name for p in tmp_path.iterdir()] == ["config.toml"]
