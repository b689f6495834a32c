"""Saved and candidate location models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SavedLocation:
    city_name: str
    last_temperature_celsius: float
    was_daytime: bool
    saved_at_epoch_millis: int


@dataclass(frozen=True)
class PlaceCandidate:
    display_name: str
    latitude: float
    longitude: float
    admin_area: str | None = None
    country_name: str | None = None

    @property
    def subtitle(self) -> str:
        return f"{self.admin_area or ''}, {self.country_name or ''}"
