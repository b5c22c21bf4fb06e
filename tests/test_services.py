import io
import json
import time
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from gruber.services import ExternalData, FetchedData, get_json
from gruber.weather import Weather

WEATHER_BODY = {
    "properties": {
        "periods": [
            {
                "startTime": "2024-05-24T17:00:00Z",
                "endTime": "2024-05-24T18:00:00Z",
                "temperature": 84,
                "probabilityOfPrecipitation": {"value": 1},
            }
        ]
    }
}


def _weather_urlopen(request, timeout=None):
    return io.BytesIO(json.dumps(WEATHER_BODY).encode())


def _response(payload):
    response = MagicMock()
    response.__enter__.return_value = io.BytesIO(json.dumps(payload).encode())
    response.__exit__.return_value = False
    return response


@pytest.fixture
def store():
    return Weather("BOX", (71, 90))


def test_fresh_data_is_not_expired():
    assert FetchedData("x").is_expired(30.0) is False


def test_old_data_is_expired():
    data = FetchedData("x", fetched_at=time.monotonic() - 100)
    assert data.is_expired(30.0) is True
    assert data.data == "x"


def test_missing_data_needs_fetch(store):
    assert store.data is None
    assert store.needs_fetch() is True


def test_fetch_if_needed_fetches_missing_data(store):
    with patch("urllib.request.urlopen", side_effect=_weather_urlopen) as urlopen:
        fetched = store.fetch_if_needed()
    assert isinstance(fetched, FetchedData)
    assert fetched.data.now().temperature == 84
    assert urlopen.call_count == 1


def test_fetch_if_needed_does_not_store_data(store):
    with patch("urllib.request.urlopen", side_effect=_weather_urlopen):
        store.fetch_if_needed()
    assert store.data is None


def test_fresh_data_is_not_refetched(store):
    with patch("urllib.request.urlopen", side_effect=_weather_urlopen) as urlopen:
        store.set_data(store.fetch_if_needed())
        assert store.needs_fetch() is False
        assert store.fetch_if_needed() is None
    assert urlopen.call_count == 1


def test_stale_data_is_refetched(store):
    store.set_data(FetchedData(None, fetched_at=time.monotonic() - 1000))
    assert store.needs_fetch() is True
    with patch("urllib.request.urlopen", side_effect=_weather_urlopen):
        fetched = store.fetch_if_needed()
    assert fetched.data.now().temperature == 84


def test_failed_fetch_yields_nothing(store):
    error = urllib.error.URLError("unreachable")
    with patch("urllib.request.urlopen", side_effect=error) as urlopen:
        assert store.fetch_if_needed() is None
    assert urlopen.call_count == 1
    assert store.data is None


def test_external_data_is_abstract():
    with pytest.raises(TypeError):
        ExternalData()


def test_get_json_decodes_body_and_sends_user_agent():
    with patch("urllib.request.urlopen", return_value=_response({"a": [1, 2]})) as urlopen:
        result = get_json("http://localhost/data")
    assert result == {"a": [1, 2]}
    request = urlopen.call_args.args[0]
    assert request.full_url == "http://localhost/data"
    assert request.get_header("User-agent") == "gruber"


def test_get_json_raises_for_error_status():
    error = urllib.error.HTTPError("http://localhost/data", 500, "failure", None, None)
    with patch("urllib.request.urlopen", side_effect=error):
        with pytest.raises(urllib.error.HTTPError):
            get_json("http://localhost/data")


def test_get_json_raises_for_invalid_body():
    response = MagicMock()
    response.__enter__.return_value = io.BytesIO(b"not json")
    response.__exit__.return_value = False
    with patch("urllib.request.urlopen", return_value=response):
        with pytest.raises(ValueError):
            get_json("http://localhost/data")