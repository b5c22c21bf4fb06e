"""Text for the dashboard and the window that displays it."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from gruber.state import State, Tab
from gruber.transit import Predictions
from gruber.weather import Forecast

FONT_FAMILY = "TkDefaultFont"
FONT_SIZE_MEDIUM = 32
FONT_SIZE_LARGE = 48
#: Number of future forecast periods listed under the current one
NUM_FUTURE_PERIODS = 8


def format_hour(moment: datetime) -> str:
    """The hour on a 12-hour clock, space padded, with a lower-case am/pm."""
    hour = moment.hour % 12 or 12
    suffix = "am" if moment.hour < 12 else "pm"
    return f"{hour:>2}{suffix}"


def weather_summary(forecast: Forecast) -> str:
    """Temperature and chance of precipitation for the current period."""
    now = forecast.now()
    return f"{now.temperature_text()} / {now.prob_of_precip_text()}"


def weather_rows(forecast: Forecast) -> list[tuple[str, str, str]]:
    """(hour, temperature, precipitation) for the upcoming daytime periods."""
    rows = []
    for period in forecast.future_periods():
        if len(rows) == NUM_FUTURE_PERIODS:
            break
        rows.append(
            (
                format_hour(period.local_start_time()),
                period.temperature_text(),
                period.prob_of_precip_text(),
            )
        )
    return rows


def transit_rows(predictions: Predictions) -> list[tuple[str, list[tuple[str, str]]]]:
    """For each line, its name and a (stop name, countdowns) row per stop."""
    return [
        (line.name, [(stop.name, str(stop.predictions)) for stop in line.stops])
        for line in predictions.lines
    ]


class DashboardView:
    """A tab bar over the weather or transit page, drawn into a Tk window."""

    def __init__(self, root: Any, state: State) -> None:
        # Imported here so the text helpers above work where Tk is unavailable.
        import tkinter as tk

        self._tk = tk
        self.root = root
        self.state = state

        tab_bar = tk.Frame(root)
        tab_bar.pack(fill="x")
        self._buttons = {}
        for tab in Tab:
            button = tk.Button(
                tab_bar,
                text=str(tab),
                font=(FONT_FAMILY, FONT_SIZE_MEDIUM),
                command=lambda selected=tab: self._select(selected),
            )
            button.pack(side="left", fill="x", expand=True, padx=5, pady=5)
            self._buttons[tab] = button

        self._content = tk.Frame(root, padx=16, pady=16)
        self._content.pack(fill="both", expand=True, anchor="nw")
        self.refresh()

    def _select(self, tab: Tab) -> None:
        self.state.select_tab(tab)
        self.refresh()

    def refresh(self) -> None:
        """Redraw the tab bar and the active page from the current state."""
        for tab, button in self._buttons.items():
            button.configure(relief="sunken" if tab is self.state.active_tab else "raised")
        for child in self._content.winfo_children():
            child.destroy()
        if self.state.active_tab is Tab.WEATHER:
            self._draw_weather()
        else:
            self._draw_transit()

    def _draw_weather(self) -> None:
        tk = self._tk
        forecast = self.state.weather.forecast()
        if forecast is None:
            tk.Label(self._content, text="Loading...").pack(anchor="w")
            return
        tk.Label(
            self._content, text=weather_summary(forecast), font=(FONT_FAMILY, FONT_SIZE_LARGE)
        ).pack(anchor="w")
        grid = tk.Frame(self._content)
        grid.pack(anchor="w", pady=(8, 0))
        for row, cells in enumerate(weather_rows(forecast)):
            for column, value in enumerate(cells):
                tk.Label(grid, text=value).grid(row=row, column=column, sticky="e", padx=4)

    def _draw_transit(self) -> None:
        tk = self._tk
        for name, stops in transit_rows(self.state.transit.predictions()):
            line = tk.Frame(self._content)
            line.pack(anchor="w", fill="x")
            tk.Label(line, text=name, font=(FONT_FAMILY, FONT_SIZE_MEDIUM)).pack(anchor="w")
            grid = tk.Frame(line)
            grid.pack(anchor="w")
            for row, (stop_name, countdowns) in enumerate(stops):
                tk.Label(grid, text=stop_name).grid(row=row, column=0, sticky="w", padx=4)
                tk.Label(grid, text=countdowns).grid(row=row, column=1, sticky="w", padx=4)