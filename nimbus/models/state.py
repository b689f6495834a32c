"""Observable orchestrator state."""

from dataclasses import dataclass

from nimbus.models.forecast import DailyEntry, HourlyEntry
from nimbus.models.location import PlaceCandidate, SavedLocation

OFFLINE_CITY_NAME = "Offline"


@dataclass(frozen=True)
class OrchestratorState:
    """Read-only projection handed to observers after every mutation.

    Each mutation replaces the whole value with dataclasses.replace, so an
    observer never sees a city name paired with another city's temperature.
    """

    city_name: str = OFFLINE_CITY_NAME
    temperature_celsius: float = 0.0
    is_daytime: bool = True
    utc_offset_seconds: int = 0
    local_time: str = "..."
    hourly: tuple[HourlyEntry, ...] = ()
    daily: tuple[DailyEntry, ...] = ()
    saved_locations: tuple[SavedLocation, ...] = ()
    search_results: tuple[PlaceCandidate, ...] = ()
    loading: bool = False
    last_error: str | None = None
