# gruber

A small fixed-size dashboard window for a touchscreen (a Raspberry Pi display
works well). It has two tabs:

- **Weather**: the current temperature and chance of precipitation from the
  National Weather Service hourly gridpoint forecast, followed by up to eight
  upcoming periods (every fourth hourly period). Periods whose local start
  time falls outside 4:30 to 22:30 are left out.
- **Transit**: for each configured line and stop, up to three upcoming
  departures from the MBTA v3 predictions API, shown as countdowns in whole
  minutes, for example `2m, 9m, 17m`.

Every second the dashboard checks whether its data is missing or stale and
starts background fetches for what is: the weather forecast is refetched once
it is more than 60 seconds old, transit predictions once they are more than
30 seconds old. A failed fetch is logged and tried again at the next check.
Until the first forecast arrives the weather tab shows `Loading...`; the
transit tab lists the configured stops with no departures yet.

The window is drawn with tkinter from the Python standard library (your
Python must have Tk support), and the package has no other runtime
dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

By default `gruber` reads `./config.json` from the current working directory.
A sample configuration:

```json
{
  "window_size": [800, 480],
  "window_position": [0, 0],
  "forecast_office": "BOX",
  "forecast_gridpoint": [71, 90],
  "transit_lines": [
    {
      "name": "Red",
      "stops": [
        {"name": "Central (inbound)", "id": 10001},
        {"name": "Central (outbound)", "id": 10002}
      ]
    }
  ]
}
```

| Key                  | Meaning                                                                 |
|----------------------|-------------------------------------------------------------------------|
| `window_size`        | Width and height of the window, in pixels.                              |
| `window_position`    | Optional. Fixed position of the window's top-left corner.               |
| `forecast_office`    | Weather forecast office code used for the gridpoint forecast.           |
| `forecast_gridpoint` | X and Y of the forecast gridpoint, unsigned integers.                   |
| `transit_lines`      | Lines to watch. Each `name` must match the route ID used by the transit API; each stop has a display `name` and a numeric stop `id` (an unsigned 32-bit integer). |

## Running

```
gruber
gruber --config /path/to/config.json
```

If the config file cannot be opened or is malformed, `gruber` prints the
error to standard error and exits with status 1. The window is not resizable.

## Using it as a library

The pieces behind the dashboard can be used on their own:

```python
from concurrent.futures import wait

from gruber.config import Config
from gruber.state import State, Tab

config = Config.load("config.json")   # raises ConfigError if malformed
state = State(config)
wait(state.check_data())              # fetch anything missing or stale
state.apply_results()                 # store the finished fetches
state.select_tab(Tab.TRANSIT)

for line in state.transit.predictions().lines:
    for stop in line.stops:
        print(line.name, stop.name, stop.predictions)
```

- `gruber.config`: `Config` (with `from_dict` and `load`) and `ConfigError`.
- `gruber.weather`: `Weather`, `Forecast` and `ForecastPeriod`, which parse the
  hourly forecast response.
- `gruber.transit`: `Transit`, `ApiPredictions`, `CountdownList` and the
  `Predictions` / `LinePrediction` / `StopPrediction` results.
- `gruber.services`: `ExternalData` (the refetch-when-stale base class),
  `FetchedData` and `get_json`.
- `gruber.view`: `weather_summary`, `weather_rows`, `transit_rows` and
  `format_hour` turn the data into the text the dashboard shows;
  `DashboardView` draws it into a Tk window.
- `gruber.app`: `main` (the `gruber` command) and `window_geometry`.