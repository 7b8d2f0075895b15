"""Tests for generator config schema and loading.

Validates that:
    - The shipped generator.v1.yaml loads with the reference geometry
    - CISTERCIAN_NUMBER_GENERATOR_* variables override YAML values
    - Explicit overrides win over the environment
    - Invalid values fail fast with ConfigError
    - The model is frozen
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from cistercian.utils.validators import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    GeneratorConfigV1,
    env_overrides,
    load_generator_config,
)


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "generator.yaml"
    path.write_text(
        "schema: generator.v1\n"
        "segment_length: 30\n"
        "line_thickness: 3\n"
        "merge_padding: 10\n"
        f"output_directory: {tmp_path / 'out'}\n"
    )
    return path


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoadGeneratorConfig:
    def test_default_file_shipped(self) -> None:
        assert DEFAULT_CONFIG_PATH.exists()

    def test_default_values(self) -> None:
        cfg = load_generator_config(environ={})
        assert cfg.segment_length == 50
        assert cfg.line_thickness == 5
        assert cfg.merge_padding == 20
        assert cfg.output_directory == Path("output")

    def test_derived_geometry(self) -> None:
        cfg = load_generator_config(environ={})
        assert cfg.offset == 2
        assert cfg.numeral_size == (100, 200)
        assert cfg.numerals_directory == Path("output") / "CistercianNumbers"
        assert cfg.merge_directory == Path("output") / "merge"

    def test_custom_file(self, config_file: Path, tmp_path: Path) -> None:
        cfg = load_generator_config(config_file, environ={})
        assert cfg.segment_length == 30
        assert cfg.offset == 1
        assert cfg.output_directory == tmp_path / "out"

    def test_env_overrides_yaml(self, config_file: Path) -> None:
        environ = {
            "CISTERCIAN_NUMBER_GENERATOR_SEGMENT_LENGTH": "80",
            "CISTERCIAN_NUMBER_GENERATOR_LINE_THICKNESS": "7",
            "CISTERCIAN_NUMBER_GENERATOR_OUTPUT_DIRECTORY": "/tmp/elsewhere",
        }
        cfg = load_generator_config(config_file, environ=environ)
        assert cfg.segment_length == 80
        assert cfg.line_thickness == 7
        assert cfg.merge_padding == 10
        assert cfg.output_directory == Path("/tmp/elsewhere")

    def test_process_environment_is_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CISTERCIAN_NUMBER_GENERATOR_MERGE_PADDING", "0")
        assert load_generator_config().merge_padding == 0

    def test_explicit_overrides_win(self, config_file: Path) -> None:
        environ = {"CISTERCIAN_NUMBER_GENERATOR_SEGMENT_LENGTH": "80"}
        cfg = load_generator_config(
            config_file, environ=environ, segment_length=40, output_directory=None
        )
        assert cfg.segment_length == 40
        assert cfg.output_directory.name == "out"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_generator_config(tmp_path / "nope.yaml")

    def test_invalid_env_value(self) -> None:
        environ = {"CISTERCIAN_NUMBER_GENERATOR_SEGMENT_LENGTH": "fifty"}
        with pytest.raises(ConfigError, match="validation failed"):
            load_generator_config(environ=environ)


class TestEnvOverrides:
    def test_ignores_unrelated_and_empty(self) -> None:
        environ = {
            "CISTERCIAN_NUMBER_GENERATOR_LINE_THICKNESS": "",
            "CISTERCIAN_NUMBER_GENERATOR_MERGE_PADDING": "4",
            "PATH": "/usr/bin",
        }
        assert env_overrides(environ) == {"merge_padding": "4"}


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class TestSchema:
    def test_wrong_schema(self) -> None:
        with pytest.raises(ValidationError, match="generator.v1"):
            GeneratorConfigV1(schema="generator.v2")

    @pytest.mark.parametrize("field", ["segment_length", "line_thickness"])
    def test_non_positive(self, field: str) -> None:
        with pytest.raises(ValidationError):
            GeneratorConfigV1(**{field: 0})

    def test_negative_padding(self) -> None:
        with pytest.raises(ValidationError):
            GeneratorConfigV1(merge_padding=-1)

    def test_thickness_is_independent_of_segment_length(self) -> None:
        cfg = GeneratorConfigV1(segment_length=4, line_thickness=9)
        assert cfg.line_thickness == 9

    def test_no_upper_bound_on_segment_length(self) -> None:
        assert GeneratorConfigV1(segment_length=5000).numeral_size == (10000, 20000)

    def test_frozen(self) -> None:
        cfg = GeneratorConfigV1()
        with pytest.raises(ValidationError):
            cfg.segment_length = 10  # type: ignore[misc]
