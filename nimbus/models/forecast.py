"""Forecast data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HourlyEntry:
    label: str  # time of day, e.g. "14:00"
    temperature_celsius: int


@dataclass(frozen=True)
class DailyEntry:
    label: str  # "Today" or "MM-DD"
    high_celsius: int
    low_celsius: int


@dataclass(frozen=True)
class ForecastSnapshot:
    temperature_celsius: float
    is_daytime: bool
    utc_offset_seconds: int
    weather_code: int = 0
    hourly: tuple[HourlyEntry, ...] = ()
    daily: tuple[DailyEntry, ...] = ()
