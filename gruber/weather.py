"""Hourly forecast from the weather.gov API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Any, ClassVar, Iterator

from gruber.services import ExternalData, get_json

logger = logging.getLogger(__name__)

API_HOST = "https://api.weather.gov"
# Start and end (inclusive) of forecast times that should be shown
DAY_START = time(4, 30)
DAY_END = time(22, 30)
#: Every n-th future period is shown
PERIOD_INTERVAL = 4


def _parse_utc(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"Expected timestamp string, got {value!r}")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        raise ValueError(f"Timestamp without offset: {value!r}")
    return moment.astimezone(timezone.utc)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ForecastPeriod:
    """One period of the hourly forecast."""

    start_time: datetime
    end_time: datetime
    temperature: int
    probability_of_precipitation: int | None

    @classmethod
    def from_dict(cls, data: Any) -> ForecastPeriod:
        try:
            temperature = data["temperature"]
            precip = data["probabilityOfPrecipitation"]["value"]
            start_time = _parse_utc(data["startTime"])
            end_time = _parse_utc(data["endTime"])
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed forecast period: {exc}") from exc
        if not _is_int(temperature):
            raise ValueError(f"Invalid temperature {temperature!r}")
        if precip is not None and not _is_int(precip):
            raise ValueError(f"Invalid probability of precipitation {precip!r}")
        return cls(start_time, end_time, temperature, precip)

    def local_start_time(self) -> datetime:
        """Start of this period in the local time zone."""
        return self.start_time.astimezone()

    def temperature_text(self) -> str:
        return f"{self.temperature}°"

    def prob_of_precip_text(self) -> str:
        return f"{self.probability_of_precipitation or 0}%"


@dataclass(frozen=True)
class Forecast:
    """A decoded hourly forecast."""

    periods: tuple[ForecastPeriod, ...]

    @classmethod
    def from_dict(cls, data: Any) -> Forecast:
        try:
            periods = data["properties"]["periods"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed forecast: {exc}") from exc
        if not isinstance(periods, list):
            raise ValueError(f"Expected list of periods, got {periods!r}")
        return cls(tuple(ForecastPeriod.from_dict(period) for period in periods))

    def now(self) -> ForecastPeriod:
        """The current forecast period."""
        return self.periods[0]

    def future_periods(self) -> Iterator[ForecastPeriod]:
        """Every n-th future period, skipping those in the middle of the night."""
        for period in self.periods[1::PERIOD_INTERVAL]:
            if DAY_START <= period.local_start_time().time() <= DAY_END:
                yield period


class Weather(ExternalData[Forecast]):
    """The forecast for one gridpoint of a forecast office."""

    TTL: ClassVar[float] = 60.0

    def __init__(self, office: str, gridpoint: tuple[int, int]) -> None:
        super().__init__()
        x, y = gridpoint
        self.url = f"{API_HOST}/gridpoints/{office}/{x},{y}/forecast/hourly"

    def forecast(self) -> Forecast | None:
        return None if self.data is None else self.data.data

    def fetch(self) -> Forecast:
        logger.info("Fetching weather data from %s", self.url)
        return Forecast.from_dict(get_json(self.url))