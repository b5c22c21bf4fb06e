"""Global application state and the background refreshing of its data."""

from __future__ import annotations

import enum
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from gruber.config import Config
from gruber.services import ExternalData, FetchedData
from gruber.transit import Transit
from gruber.weather import Weather


class Tab(enum.Enum):
    """The pages of the dashboard, in display order."""

    WEATHER = "Weather"
    TRANSIT = "Transit"

    def __str__(self) -> str:
        return self.value


class State:
    """The active tab and every external data source.

    Stale sources are refetched on worker threads by :meth:`check_data`;
    :meth:`apply_results` stores whatever those fetches have produced.
    """

    def __init__(self, config: Config) -> None:
        self.active_tab = Tab.WEATHER
        self.weather = Weather(config.forecast_office, config.forecast_gridpoint)
        self.transit = Transit(config.transit_lines)
        self._sources: tuple[ExternalData[Any], ...] = (self.weather, self.transit)
        self._executor = ThreadPoolExecutor(
            max_workers=len(self._sources), thread_name_prefix="gruber-fetch"
        )
        self._pending: dict[ExternalData[Any], Future[FetchedData[Any] | None]] = {}

    def select_tab(self, tab: Tab) -> None:
        self.active_tab = Tab(tab)

    def check_data(self) -> list[Future[FetchedData[Any] | None]]:
        """Start fetches, in parallel, for every source that is missing or stale.

        A source whose previous fetch is still running is left alone. Returns
        the futures of the fetches that were started.
        """
        started = []
        for source in self._sources:
            if source in self._pending or not source.needs_fetch():
                continue
            future = self._executor.submit(source.fetch_if_needed)
            self._pending[source] = future
            started.append(future)
        return started

    def apply_results(self) -> list[ExternalData[Any]]:
        """Store the output of every finished fetch; return the updated sources."""
        updated = []
        for source, future in list(self._pending.items()):
            if not future.done():
                continue
            del self._pending[source]
            result = future.result()
            if result is not None:
                source.set_data(result)
                updated.append(source)
        return updated