"""Externally fetched data that is kept for a limited time before refetching."""

from __future__ import annotations

import json
import logging
import time
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar

logger = logging.getLogger(__name__)

USER_AGENT = "gruber"
REQUEST_TIMEOUT = 30.0

T = TypeVar("T")


@dataclass
class FetchedData(Generic[T]):
    """Fetched data together with the monotonic time it was fetched at."""

    data: T
    fetched_at: float = field(default_factory=time.monotonic)

    def is_expired(self, ttl: float) -> bool:
        """Whether more than ``ttl`` seconds have passed since the fetch."""
        return self.fetched_at + ttl < time.monotonic()


class ExternalData(ABC, Generic[T]):
    """A store for data from an external API, refetched once it is stale."""

    #: Minimum number of seconds between fetches.
    TTL: ClassVar[float]

    def __init__(self) -> None:
        self.data: FetchedData[T] | None = None

    def set_data(self, data: FetchedData[T]) -> None:
        """Store the output of a fetch."""
        self.data = data

    def needs_fetch(self) -> bool:
        """Whether the stored data is missing or stale."""
        return self.data is None or self.data.is_expired(self.TTL)

    @abstractmethod
    def fetch(self) -> T:
        """Fetch new data from the external source."""

    def fetch_if_needed(self) -> FetchedData[T] | None:
        """Fetch fresh data if the stored data is missing or stale.

        Returns ``None`` when the stored data is still fresh or the fetch
        failed; a failure is logged and otherwise ignored.
        """
        if not self.needs_fetch():
            return None
        try:
            value = self.fetch()
        except Exception:
            logger.exception("Error fetching data for %s", type(self).__name__)
            return None
        return FetchedData(value)


def get_json(url: str) -> Any:
    """GET ``url`` and decode the JSON body; HTTP error statuses raise."""
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    with urllib.request.urlopen(request, timeout=REQUEST_TIMEOUT) as response:
        return json.load(response)