"""YAML schema validation and config loading.

Validates the generator configuration (generator.v1.yaml) with pydantic:
    - segment_length: length of one numeral segment in pixels
    - line_thickness: stroke width in pixels
    - merge_padding: outer padding of composed sheets in pixels
    - output_directory: root of every generated artifact

Values come from YAML first, then environment variables override them:
    CISTERCIAN_NUMBER_GENERATOR_SEGMENT_LENGTH
    CISTERCIAN_NUMBER_GENERATOR_LINE_THICKNESS
    CISTERCIAN_NUMBER_GENERATOR_MERGE_PADDING
    CISTERCIAN_NUMBER_GENERATOR_OUTPUT_DIRECTORY

The resulting model is frozen: configuration is fixed at process start.

Usage:
    from cistercian.utils import validators

    cfg = validators.load_generator_config()                 # shipped default
    cfg = validators.load_generator_config("my_config.yaml")
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from . import fs

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "generator.v1.yaml"

ENV_PREFIX = "CISTERCIAN_NUMBER_GENERATOR_"
ENV_FIELDS = ("segment_length", "line_thickness", "merge_padding", "output_directory")


class ConfigError(ValueError):
    """Raised when configuration validation fails."""


# ============================================================================
# GENERATOR SCHEMA V1
# ============================================================================

class GeneratorConfigV1(BaseModel):
    """Numeral generator configuration (generator.v1.yaml schema).

    All geometry in pixels. Canvas of one numeral is
    (2 * segment_length) x (4 * segment_length).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_version: str = Field("generator.v1", alias="schema", description="Schema version")
    segment_length: int = Field(50, gt=0, description="Segment length (px)")
    line_thickness: int = Field(5, gt=0, description="Stroke width (px)")
    merge_padding: int = Field(20, ge=0, description="Sheet padding (px)")
    output_directory: Path = Field(Path("output"), description="Root output directory")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "generator.v1":
            raise ValueError(f"Expected schema 'generator.v1', got '{v}'")
        return v

    @property
    def offset(self) -> int:
        """Half the line thickness, rounded down."""
        return self.line_thickness // 2

    @property
    def numeral_size(self) -> tuple:
        """(width, height) of one rendered numeral in pixels."""
        return (self.segment_length * 2, self.segment_length * 4)

    @property
    def numerals_directory(self) -> Path:
        return self.output_directory / "CistercianNumbers"

    @property
    def merge_directory(self) -> Path:
        return self.output_directory / "merge"


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect config values set through CISTERCIAN_NUMBER_GENERATOR_* variables."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for name in ENV_FIELDS:
        value = environ.get(ENV_PREFIX + name.upper())
        if value is not None and value != "":
            overrides[name] = value
    return overrides


def load_generator_config(
    path: Union[str, Path, None] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any
) -> GeneratorConfigV1:
    """Load and validate the generator configuration.

    Parameters
    ----------
    path : Union[str, Path, None]
        Path to generator.v1.yaml; None loads the default shipped with the package
    environ : Mapping[str, str], optional
        Environment to read overrides from, default os.environ
    **overrides
        Explicit values (e.g. from CLI flags); applied last, None values ignored

    Returns
    -------
    GeneratorConfigV1
        Validated, frozen configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ConfigError
        If validation fails (with actionable error message)
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Generator config not found: {path}")

    logger.debug("Loading generator config from %s", path)
    data = dict(fs.load_yaml(path))
    data.update(env_overrides(environ))
    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return GeneratorConfigV1(**data)
    except ValidationError as e:
        raise ConfigError(f"Generator config validation failed at {path}: {e}") from e
