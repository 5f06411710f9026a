from __future__ import annotations

"""Configuration utilities for ptwarp.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the defaults used by the fit engine,
the simplex optimizer, logging and the plotting helpers.  Instances can be
populated from environment variables (prefix ``PTWARP_``, nested sections
separated by ``__``) or from YAML/JSON files with matching nested keys.
"""

import json
from logging import getLevelName
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import EnvSettingsSource

from .types import OptimCrit, WarpType

try:  # pragma: no cover - optional dependency
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_floats(value: str) -> list[float]:
    return [float(item) for item in value.split(",") if item.strip()]


def _split_seeds(value: str) -> list[list[float]]:
    return [_split_floats(seed) for seed in value.split(";") if seed.strip()]


def _coerce_floats(value: Any) -> Any:
    if isinstance(value, str):
        return _split_floats(value)
    if isinstance(value, (int, float)):
        return [float(value)]
    if isinstance(value, (list, tuple)):
        return [float(item) for item in value]
    return value


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class FitSettings(SectionModel):
    """Defaults for :class:`~ptwarp.core.model.PtwModel`."""

    warp_type: WarpType = WarpType.INDIVIDUAL
    optim_crit: OptimCrit = OptimCrit.WCC
    trwdth: int = Field(default=20, ge=0)
    try_restart: bool = False
    init_coeffs: list[float] = Field(default_factory=lambda: [0.0, 1.0, 0.0])
    restart_seeds: list[list[float]] = Field(
        default_factory=lambda: [[0.0, 1.0, 0.0], [0.0, 1.0, 0.0, 0.0]]
    )

    @field_validator("warp_type", mode="before")
    @classmethod
    def _parse_warp_type(cls, value: Any) -> Any:
        return WarpType.parse(value)

    @field_validator("optim_crit", mode="before")
    @classmethod
    def _parse_optim_crit(cls, value: Any) -> Any:
        return OptimCrit.parse(value)

    @field_validator("init_coeffs", mode="before")
    @classmethod
    def _coerce_float_list(cls, value: Any) -> Any:
        return _coerce_floats(value)

    @field_validator("restart_seeds", mode="before")
    @classmethod
    def _coerce_seed_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _split_seeds(value)
        if isinstance(value, (list, tuple)):
            return [_coerce_floats(seed) for seed in value]
        return value

    @field_validator("init_coeffs")
    @classmethod
    def _non_empty(cls, value: list[float]) -> list[float]:
        if not value:
            raise ValueError("init_coeffs must contain at least one coefficient")
        return value


class OptimizerSettings(SectionModel):
    """Nelder-Mead simplex parameters."""

    alpha: float = 1.0
    gamma: float = 2.0
    rho: float = 0.5
    sigma: float = 0.5
    max_iter: int = Field(default=1000, ge=0)
    tol: float = 1e-6
    rel_step: float = 0.05
    zero_step: float = 0.01
    zero_threshold: float = 1e-4


class LoggingSettings(SectionModel):
    """Log level and format used by the command line interface."""

    level: str = "WARNING"
    format: str = "%(levelname)s:%(name)s:%(message)s"

    @field_validator("level", mode="before")
    @classmethod
    def _known_level(cls, value: Any) -> Any:
        name = str(value).strip().upper()
        if not isinstance(getLevelName(name), int):
            raise ValueError(f"unknown log level {value!r}")
        return name


class VizSettings(SectionModel):
    """Configuration for the alignment plot."""

    title: str = "Parametric time warping"
    save: str | None = None


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    fit: FitSettings = Field(default_factory=FitSettings)
    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    viz: VizSettings = Field(default_factory=VizSettings)

    model_config = SettingsConfigDict(
        env_prefix="PTWARP_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        class LegacyEnvSettingsSource(EnvSettingsSource):
            def decode_complex_value(self, field_name, target_field, value):  # type: ignore[override]
                try:
                    return super().decode_complex_value(field_name, target_field, value)
                except json.JSONDecodeError:
                    return value

        env_settings.__class__ = LegacyEnvSettingsSource
        return init_settings, env_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``PTWARP_*`` environment variables only."""

        return cls()


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAML is required to load YAML files")
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)


__all__ = [
    "FitSettings",
    "OptimizerSettings",
    "LoggingSettings",
    "VizSettings",
    "Settings",
    "load_settings",
]
