"""Touchscreen dashboard for the weather forecast and transit departures."""

__version__ = "0.1.0"