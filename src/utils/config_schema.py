"""Pydantic models describing the dataset generator's configuration.

These models mirror the structure of ``configs/config.yaml`` and provide
type validation as well as defaults for every field, so a config file only
has to mention the values it changes.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, ConfigDict


class DatasetConfig(BaseModel):
    min_rating: int = Field(2000, ge=0)
    max_games: int = Field(20_000, gt=0)
    encoding_side: Literal["white", "black"] = "white"
    on_move_error: Literal["skip", "abort"] = "skip"


class OutputConfig(BaseModel):
    dir: str = "data/planes"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    progress: bool = True


class ConfigModel(BaseModel):
    """Complete configuration model."""

    model_config = ConfigDict(extra="forbid")

    dataset: DatasetConfig = DatasetConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()
