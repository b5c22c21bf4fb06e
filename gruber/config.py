"""Application configuration loaded from a JSON file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from gruber.transit import TransitLine

logger = logging.getLogger(__name__)

DEFAULT_PATH = "./config.json"


class ConfigError(ValueError):
    """The configuration file is malformed."""


def _number_pair(value: Any, name: str) -> tuple[float, float]:
    if (
        not isinstance(value, list)
        or len(value) != 2
        or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in value)
    ):
        raise ConfigError(f"{name} must be a pair of numbers, got {value!r}")
    return float(value[0]), float(value[1])


def _unsigned_pair(value: Any, name: str) -> tuple[int, int]:
    if (
        not isinstance(value, list)
        or len(value) != 2
        or any(isinstance(v, bool) or not isinstance(v, int) or not 0 <= v < 2**32 for v in value)
    ):
        raise ConfigError(f"{name} must be a pair of unsigned integers, got {value!r}")
    return value[0], value[1]


@dataclass(frozen=True)
class Config:
    window_size: tuple[float, float]
    forecast_office: str
    forecast_gridpoint: tuple[int, int]
    transit_lines: tuple[TransitLine, ...]
    #: Optionally force the position of the opening window
    window_position: tuple[float, float] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be an object, got {data!r}")
        try:
            window_size = _number_pair(data["window_size"], "window_size")
            office = data["forecast_office"]
            gridpoint = _unsigned_pair(data["forecast_gridpoint"], "forecast_gridpoint")
            raw_lines = data["transit_lines"]
        except KeyError as exc:
            raise ConfigError(f"Missing config field {exc}") from exc
        if not isinstance(office, str):
            raise ConfigError(f"forecast_office must be a string, got {office!r}")
        if not isinstance(raw_lines, list):
            raise ConfigError(f"transit_lines must be a list, got {raw_lines!r}")
        try:
            lines = tuple(TransitLine.from_dict(line) for line in raw_lines)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        position = data.get("window_position")
        return cls(
            window_size=window_size,
            forecast_office=office,
            forecast_gridpoint=gridpoint,
            transit_lines=lines,
            window_position=None if position is None else _number_pair(position, "window_position"),
        )

    @classmethod
    def load(cls, path: str | Path = DEFAULT_PATH) -> Config:
        """Load config from a file; a missing file raises ``FileNotFoundError``."""
        logger.info("Loading config from `%s`", path)
        with open(path, encoding="utf-8") as file:
            try:
                return cls.from_dict(json.load(file))
            except (ValueError, UnicodeDecodeError) as exc:
                raise ConfigError(f"Error parsing config file {path}: {exc}") from exc