"""Departure predictions for configured transit lines and stops."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Iterable, Iterator

from gruber.services import ExternalData, get_json

logger = logging.getLogger(__name__)

API_URL = "https://api-v3.mbta.com/predictions"
#: Max number of pending departures to show for a stop
MAX_PREDICTIONS = 3


def _parse_utc(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"Expected timestamp string, got {value!r}")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        raise ValueError(f"Timestamp without offset: {value!r}")
    return moment.astimezone(timezone.utc)


def _whole_minutes(delta: timedelta) -> int:
    """Whole minutes in ``delta``, truncated toward zero."""
    micros = delta // timedelta(microseconds=1)
    minutes = abs(micros) // 60_000_000
    return minutes if micros >= 0 else -minutes


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Expected string for {what}, got {value!r}")
    return value


@dataclass(frozen=True)
class TransitStop:
    """A stop (and direction) on a line whose departures are shown."""

    name: str
    id: int

    @classmethod
    def from_dict(cls, data: Any) -> TransitStop:
        if not isinstance(data, dict):
            raise ValueError(f"Expected object for transit stop, got {data!r}")
        try:
            name, stop_id = data["name"], data["id"]
        except KeyError as exc:
            raise ValueError(f"Transit stop is missing {exc}") from exc
        _require_str(name, "stop name")
        if isinstance(stop_id, bool) or not isinstance(stop_id, int) or not 0 <= stop_id < 2**32:
            raise ValueError(f"Invalid stop id {stop_id!r}")
        return cls(name=name, id=stop_id)


@dataclass(frozen=True)
class TransitLine:
    """A transit line to show predictions for."""

    name: str
    stops: tuple[TransitStop, ...]

    @classmethod
    def from_dict(cls, data: Any) -> TransitLine:
        if not isinstance(data, dict):
            raise ValueError(f"Expected object for transit line, got {data!r}")
        try:
            name, stops = data["name"], data["stops"]
        except KeyError as exc:
            raise ValueError(f"Transit line is missing {exc}") from exc
        _require_str(name, "line name")
        if not isinstance(stops, list):
            raise ValueError(f"Expected list of stops, got {stops!r}")
        return cls(name=name, stops=tuple(TransitStop.from_dict(stop) for stop in stops))


@dataclass(frozen=True)
class ApiPrediction:
    """One prediction from the API response."""

    route_id: str
    stop_id: str
    departure_time: datetime | None


@dataclass(frozen=True)
class ApiPredictions:
    """A decoded predictions response."""

    predictions: tuple[ApiPrediction, ...]

    @classmethod
    def from_dict(cls, data: Any) -> ApiPredictions:
        try:
            entries = data["data"]
            if not isinstance(entries, list):
                raise ValueError(f"Expected list of predictions, got {entries!r}")
            predictions = []
            for entry in entries:
                departure = entry["attributes"].get("departure_time")
                relationships = entry["relationships"]
                predictions.append(
                    ApiPrediction(
                        route_id=_require_str(relationships["route"]["data"]["id"], "route id"),
                        stop_id=_require_str(relationships["stop"]["data"]["id"], "stop id"),
                        departure_time=None if departure is None else _parse_utc(departure),
                    )
                )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed predictions response: {exc}") from exc
        return cls(predictions=tuple(predictions))


@dataclass
class CountdownList:
    """Minutes until upcoming departures, at most ``MAX_PREDICTIONS`` of them."""

    minutes: list[int] = field(default_factory=list)

    def push(self, departure_time: datetime, now: datetime | None = None) -> None:
        """Add a departure; once the list is full further ones are dropped."""
        if len(self.minutes) < MAX_PREDICTIONS:
            now = now or datetime.now(timezone.utc)
            self.minutes.append(_whole_minutes(departure_time - now))

    def __len__(self) -> int:
        return len(self.minutes)

    def __iter__(self) -> Iterator[int]:
        return iter(self.minutes)

    def __str__(self) -> str:
        return ", ".join(f"{minutes}m" for minutes in self.minutes)


@dataclass
class StopPrediction:
    id: int
    name: str
    predictions: CountdownList = field(default_factory=CountdownList)


@dataclass
class LinePrediction:
    name: str
    stops: list[StopPrediction]


@dataclass
class Predictions:
    lines: list[LinePrediction]


class Transit(ExternalData[ApiPredictions]):
    """Departure predictions for the configured lines."""

    TTL: ClassVar[float] = 30.0

    def __init__(self, lines: Iterable[TransitLine]) -> None:
        super().__init__()
        self.lines = tuple(lines)
        stop_ids = ",".join(str(stop.id) for line in self.lines for stop in line.stops)
        self.url = f"{API_URL}?filter[stop]={stop_ids}"

    def predictions(self, now: datetime | None = None) -> Predictions:
        """Predictions for every stop on every line, empty until data arrives."""
        now = now or datetime.now(timezone.utc)
        grouped = {
            line.name: [StopPrediction(id=stop.id, name=stop.name) for stop in line.stops]
            for line in self.lines
        }
        if self.data is not None:
            for prediction in self.data.data.predictions:
                # No departure time means the stop is being skipped
                if prediction.departure_time is None:
                    continue
                stops = grouped.get(prediction.route_id)
                if stops is None:
                    logger.error("Unknown route %s", prediction.route_id)
                    continue
                stop = next((s for s in stops if str(s.id) == prediction.stop_id), None)
                if stop is None:
                    logger.error(
                        "Unknown stop %s for route %s", prediction.stop_id, prediction.route_id
                    )
                    continue
                stop.predictions.push(prediction.departure_time, now)
        return Predictions(
            lines=[LinePrediction(name=name, stops=stops) for name, stops in grouped.items()]
        )

    def fetch(self) -> ApiPredictions:
        logger.info("Fetching transit data from %s", self.url)
        return ApiPredictions.from_dict(get_json(self.url))