"""
Configuration models and YAML I/O for warp10-frames.

This module defines the Pydantic models describing one Warp 10 datasource,
plus helpers to load them from a YAML file or from the JSON settings blob
a dashboard host stores for the datasource.

Key models:
- DatasourceOptions: Endpoint, WarpScript constants/macros, fan-out limits.
- ConstProp: A named constant or macro injected ahead of every query.

Key functions:
- load_options(path) -> DatasourceOptions: Load and validate from YAML.
- save_options(options, path): Serialize to YAML.
- options_from_json_data(data) -> DatasourceOptions: Validate host JSON.

Why Pydantic + YAML:
- Pydantic gives us strict validation, type coercion, and clear error messages.
- The host stores the same settings as JSON; both paths share one model.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from warp10_frames.decoders.base import DecodeOptions
from warp10_frames.exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class ConstProp(BaseModel):
    """A name/value pair stored on the WarpScript stack before each query."""

    name: str = Field(..., min_length=1)
    value: str


class DatasourceOptions(BaseModel):
    """Settings for one Warp 10 datasource.

    ``constants`` and ``macros`` are read from the ``const`` / ``macro``
    keys the host uses, and may also be given by field name.
    """

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(..., description="Base URL of the Warp 10 instance")
    constants: list[ConstProp] = Field(
        default_factory=list,
        alias="const",
        description="Quoted string constants, stored as '<value>' '<name>' STORE",
    )
    macros: list[ConstProp] = Field(
        default_factory=list,
        alias="macro",
        description="Macro bodies, stored verbatim as <value> '<name>' STORE",
    )
    max_workers: int | None = Field(
        None, ge=1, description="Thread pool size for query and series fan-out"
    )
    series_timeout: float | None = Field(
        None, gt=0, description="Seconds allowed to convert all series of a response"
    )
    query_timeout: float | None = Field(
        None, gt=0, description="Seconds allowed for all queries of a request"
    )

    def decode_options(self, hide_labels: bool = False) -> DecodeOptions:
        """Decoder options for one query against this datasource."""
        return DecodeOptions(
            hide_labels=hide_labels,
            max_workers=self.max_workers,
            series_timeout=self.series_timeout,
        )


def load_options(path: str | Path) -> DatasourceOptions:
    """Load and validate a datasource YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigValidationError(f"Config file is empty: {path}")
    logger.info("Loaded datasource config from %s", path)
    return DatasourceOptions.model_validate(raw)


def save_options(options: DatasourceOptions, path: str | Path) -> None:
    """Serialize DatasourceOptions to YAML, using the host's key names."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = options.model_dump(mode="json", by_alias=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# warp10-frames datasource configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved datasource config to %s", path)


def options_from_json_data(data: bytes | str) -> DatasourceOptions:
    """Validate the JSON settings blob the host keeps for a datasource.

    Raises:
        pydantic.ValidationError: If the blob is not valid JSON or fails
            schema validation.
    """
    return DatasourceOptions.model_validate_json(data)
