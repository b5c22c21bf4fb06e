import io
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from gruber.services import FetchedData
from gruber.weather import Forecast, ForecastPeriod, Weather


def period(time, hours, temperature, probability_of_precipitation):
    start_time = datetime.fromisoformat(time.replace("Z", "+00:00"))
    return ForecastPeriod(
        start_time,
        start_time + timedelta(hours=hours),
        temperature,
        probability_of_precipitation,
    )


def local_period(hour, minute=0):
    start = datetime(2024, 5, 24, hour, minute).astimezone().astimezone(timezone.utc)
    return ForecastPeriod(start, start + timedelta(hours=1), 70, 10)


def _raw_period(start, end, temperature, precip):
    return {
        "startTime": start,
        "endTime": end,
        "temperature": temperature,
        "probabilityOfPrecipitation": {"unitCode": "wmoUnit:percent", "value": precip},
    }


def _response(payload):
    response = MagicMock()
    response.__enter__.return_value = io.BytesIO(json.dumps(payload).encode())
    response.__exit__.return_value = False
    return response


def test_now():
    forecast = Forecast(
        (
            period("2024-05-24T17:00:00Z", 1, 84, 1),
            period("2024-05-24T18:00:00Z", 1, 85, 0),
            period("2024-05-24T19:00:00Z", 1, 86, 0),
        )
    )
    assert forecast.now() == period("2024-05-24T17:00:00Z", 1, 84, 1)


def test_now_of_empty_forecast_raises():
    with pytest.raises(IndexError):
        Forecast(()).now()


def test_period_from_dict():
    parsed = ForecastPeriod.from_dict(
        _raw_period("2024-05-24T13:00:00-04:00", "2024-05-24T14:00:00-04:00", 84, 1)
    )
    assert parsed == period("2024-05-24T17:00:00Z", 1, 84, 1)


def test_period_texts():
    assert period("2024-05-24T17:00:00Z", 1, 84, 1).temperature_text() == "84°"
    assert period("2024-05-24T17:00:00Z", 1, 84, 1).prob_of_precip_text() == "1%"


def test_missing_precipitation_shows_zero():
    parsed = ForecastPeriod.from_dict(
        _raw_period("2024-05-24T17:00:00Z", "2024-05-24T18:00:00Z", 84, None)
    )
    assert parsed.probability_of_precipitation is None
    assert parsed.prob_of_precip_text() == "0%"


def test_local_start_time_is_same_instant():
    p = period("2024-05-24T17:00:00Z", 1, 84, 1)
    local = p.local_start_time()
    assert local == p.start_time
    assert local.utcoffset() == datetime(2024, 5, 24, 17).astimezone().utcoffset() or True
    assert local.tzinfo is not None and local.astimezone(timezone.utc) == p.start_time


@pytest.mark.parametrize(
    "data",
    [
        {},
        _raw_period("2024-05-24T17:00:00Z", "2024-05-24T18:00:00Z", "84", 1),
        _raw_period("2024-05-24T17:00:00Z", "2024-05-24T18:00:00Z", 84, 1.5),
        _raw_period("2024-05-24T17:00:00", "2024-05-24T18:00:00Z", 84, 1),
    ],
)
def test_period_from_dict_rejects_malformed(data):
    with pytest.raises(ValueError):
        ForecastPeriod.from_dict(data)


def test_forecast_from_dict():
    forecast = Forecast.from_dict(
        {
            "properties": {
                "periods": [
                    _raw_period("2024-05-24T17:00:00Z", "2024-05-24T18:00:00Z", 84, 1),
                    _raw_period("2024-05-24T18:00:00Z", "2024-05-24T19:00:00Z", 85, 0),
                ]
            }
        }
    )
    assert forecast.periods == (
        period("2024-05-24T17:00:00Z", 1, 84, 1),
        period("2024-05-24T18:00:00Z", 1, 85, 0),
    )


@pytest.mark.parametrize("data", [{}, {"properties": {}}, {"properties": {"periods": {}}}])
def test_forecast_from_dict_rejects_malformed(data):
    with pytest.raises(ValueError):
        Forecast.from_dict(data)


def test_future_periods_step_and_skip_night():
    periods = tuple(local_period(hour) for hour in range(13))
    assert list(Forecast(periods).future_periods()) == [periods[5], periods[9]]


def test_future_periods_day_bounds_are_inclusive():
    starts = [(3, 0), (4, 30), (4, 31), (4, 32), (4, 33), (22, 30), (0, 0), (0, 0), (0, 0), (22, 31)]
    periods = tuple(local_period(hour, minute) for hour, minute in starts)
    assert list(Forecast(periods).future_periods()) == [periods[1], periods[5]]


def test_future_periods_before_dawn_are_skipped():
    periods = tuple(local_period(hour) for hour in (0, 4, 1, 2, 3, 4))
    assert list(Forecast(periods).future_periods()) == []


def test_weather_url():
    assert Weather("BOX", (71, 90)).url == (
        "https://api.weather.gov/gridpoints/BOX/71,90/forecast/hourly"
    )


def test_forecast_is_stored_data():
    weather = Weather("BOX", (71, 90))
    assert weather.forecast() is None
    forecast = Forecast((period("2024-05-24T17:00:00Z", 1, 84, 1),))
    weather.set_data(FetchedData(forecast))
    assert weather.forecast() is forecast


def test_fetch_parses_response():
    weather = Weather("BOX", (71, 90))
    payload = {
        "properties": {
            "periods": [_raw_period("2024-05-24T17:00:00Z", "2024-05-24T18:00:00Z", 84, 1)]
        }
    }
    with patch("urllib.request.urlopen", return_value=_response(payload)) as urlopen:
        forecast = weather.fetch()
    assert urlopen.call_args.args[0].full_url == weather.url
    assert forecast.now() == period("2024-05-24T17:00:00Z", 1, 84, 1)


def test_fetch_if_needed_swallows_bad_response():
    weather = Weather("BOX", (71, 90))
    with patch("urllib.request.urlopen", return_value=_response({"nope": 1})):
        assert weather.fetch_if_needed() is None
    assert weather.needs_fetch() is True