"""Open-Meteo forecast API client with retry and rate limit handling."""

import logging
import time

import httpx

from nimbus.errors import NetworkError, ParseError
from nimbus.models.forecast import DailyEntry, ForecastSnapshot, HourlyEntry

logger = logging.getLogger(__name__)

OPEN_METEO_BASE_URL = "https://api.open-meteo.com"
HOURLY_LIMIT = 24
TODAY_LABEL = "Today"

FORECAST_FLAGS = {
    "current_weather": "true",
    "hourly": "temperature_2m",
    "daily": "temperature_2m_max,temperature_2m_min",
    "timezone": "auto",
}


class ForecastClient:
    def __init__(
        self,
        base_url: str = OPEN_METEO_BASE_URL,
        timeout: float = 15.0,
        max_retries: int = 2,
        retry_base_delay: float = 1.0,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    def fetch(self, latitude: float, longitude: float) -> ForecastSnapshot:
        """Fetch current, next-24-hour and 7-day forecast for a coordinate.

        Retries on 503/429 and transport errors with exponential backoff.
        Raises NetworkError once retries are exhausted, ParseError when the
        body lacks required fields.
        """
        raw = self._get_json(latitude, longitude)
        return parse(raw)

    def _get_json(self, latitude: float, longitude: float) -> dict:
        url = f"{self.base_url}/v1/forecast"
        params = {"latitude": latitude, "longitude": longitude, **FORECAST_FLAGS}

        for attempt in range(self.max_retries + 1):
            try:
                resp = httpx.get(url, params=params, timeout=self.timeout)
                if resp.status_code in (503, 429) and attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Forecast %s returned %d, retrying in %.1fs (attempt %d/%d)",
                        url, resp.status_code, delay, attempt + 1, self.max_retries,
                    )
                    time.sleep(delay)
                    continue
                resp.raise_for_status()
                return resp.json()
            except httpx.HTTPStatusError as e:
                raise NetworkError(
                    f"Forecast request failed: {e}",
                    status_code=e.response.status_code,
                ) from e
            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "Forecast request error, retrying in %.1fs: %s", delay, e
                    )
                    time.sleep(delay)
                    continue
                raise NetworkError(f"Forecast request failed: {e}") from e
            except ValueError as e:
                raise ParseError(f"Forecast response is not JSON: {e}") from e

        raise NetworkError("Forecast retries exhausted")


def parse(raw: dict) -> ForecastSnapshot:
    """Build a ForecastSnapshot from an Open-Meteo forecast response."""
    try:
        current = raw["current_weather"]
        temperature = float(current["temperature"])
        is_day = int(current["is_day"]) == 1
        weather_code = int(current.get("weathercode", 0))
        utc_offset = int(raw["utc_offset_seconds"])
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Missing or invalid current weather field: {e}") from e

    return ForecastSnapshot(
        temperature_celsius=temperature,
        is_daytime=is_day,
        utc_offset_seconds=utc_offset,
        weather_code=weather_code,
        hourly=_parse_hourly(raw.get("hourly")),
        daily=_parse_daily(raw.get("daily")),
    )


def _parse_hourly(hourly: dict | None) -> tuple[HourlyEntry, ...]:
    if not hourly:
        return ()
    try:
        times = hourly["time"]
        temps = hourly["temperature_2m"]
        _check_lengths("hourly", times, temps)
        return tuple(
            # "2024-05-01T14:00" -> "14:00"
            HourlyEntry(
                label=_timestamp(t).split("T", 1)[-1],
                temperature_celsius=int(temps[i]),
            )
            for i, t in enumerate(times[:HOURLY_LIMIT])
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ParseError(f"Malformed hourly series: {e}") from e


def _parse_daily(daily: dict | None) -> tuple[DailyEntry, ...]:
    if not daily:
        return ()
    try:
        times = daily["time"]
        highs = daily["temperature_2m_max"]
        lows = daily["temperature_2m_min"]
        _check_lengths("daily", times, highs, lows)
        return tuple(
            DailyEntry(
                label=_daily_label(i, _timestamp(t)),
                high_celsius=int(highs[i]),
                low_celsius=int(lows[i]),
            )
            for i, t in enumerate(times)
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise ParseError(f"Malformed daily series: {e}") from e


def _check_lengths(series: str, times: list, *values: list) -> None:
    lengths = [len(times), *(len(v) for v in values)]
    if len(set(lengths)) != 1:
        raise ParseError(f"Mismatched {series} series lengths: {lengths}")


def _timestamp(value: object) -> str:
    if not isinstance(value, str):
        raise ParseError(f"Expected timestamp string, got {value!r}")
    return value


def _daily_label(index: int, date: str) -> str:
    # "2024-05-02" -> "05-02"
    return TODAY_LABEL if index == 0 else date[5:10]
