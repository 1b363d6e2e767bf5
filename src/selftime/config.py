# SPDX-License-Identifier: MIT
"""Profiler configuration.

Layers, lowest precedence first:

1. ``ProfilerConfig`` defaults
2. a YAML file (``load_config(path)``)
3. ``SELFTIME_*`` environment variables (``SELFTIME_STRICT_CLOCK=1``)
4. dotted overrides (``["ascii_units=true"]``)

The merged mapping is validated with pydantic before a ``ProfilerConfig`` is
built from it.
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pydantic import BaseModel, ConfigDict, ValidationError

from .exceptions import ConfigValidationError

ENV_PREFIX = "SELFTIME_"


@dataclass
class ProfilerConfig:
    """Runtime switches for a profiling session."""

    strict_clock: bool = False  # raise on a backwards clock instead of clamping
    ascii_units: bool = False  # "us" instead of "µs" in rendered tables
    log_scopes: bool = False  # DEBUG-log every fork and join
    check_thread: bool = True  # reject calls from threads other than the creator
    table_title: Optional[str] = None  # optional line printed above the table

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ProfilerConfigSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    strict_clock: bool = False
    ascii_units: bool = False
    log_scopes: bool = False
    check_thread: bool = True
    table_title: Optional[str] = None


def validate_config(data: Mapping[str, Any]) -> ProfilerConfig:
    """Validate a plain mapping and return the matching ``ProfilerConfig``."""
    try:
        model = ProfilerConfigSchema(**dict(data))
    except ValidationError as e:
        raise ConfigValidationError(f"invalid profiler config: {e}") from e
    return ProfilerConfig(**model.model_dump())


def _read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path_obj, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigValidationError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    # allow the settings to live under a "profiler:" group
    if set(data) == {"profiler"} and isinstance(data["profiler"], dict):
        data = data["profiler"]
    return data


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect ``SELFTIME_<FIELD>`` variables as raw strings."""
    environ = os.environ if environ is None else environ
    out: Dict[str, str] = {}
    for f in fields(ProfilerConfig):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            out[f.name] = environ[key]
    return out


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ProfilerConfig:
    """Build a validated ``ProfilerConfig`` from file, environment and overrides."""
    layers = [OmegaConf.create(ProfilerConfig().to_dict())]
    if path is not None:
        layers.append(OmegaConf.create(_read_yaml(path)))
    layers.append(OmegaConf.create(env_overrides(environ)))
    try:
        if overrides:
            layers.append(OmegaConf.from_dotlist(list(overrides)))
        merged = OmegaConf.to_container(OmegaConf.merge(*layers), resolve=True)
    except OmegaConfBaseException as e:
        raise ConfigValidationError(f"could not merge config: {e}") from e
    return validate_config(merged)  # type: ignore[arg-type]
