"""Output formatters for orchestrator state, saved locations and search results."""

import json
from collections.abc import Sequence
from dataclasses import asdict

from nimbus.models.location import PlaceCandidate, SavedLocation
from nimbus.models.state import OrchestratorState


def format_state_text(s: OrchestratorState) -> str:
    """Plain text rendering of the current forecast."""
    period = "day" if s.is_daytime else "night"
    lines = [
        f"=== {s.city_name} ===",
        f"Now: {int(s.temperature_celsius)}°C ({period}) | Local time: {s.local_time}",
    ]
    if s.hourly:
        lines.append("Next 24 hours:")
        lines.append(
            "  " + "  ".join(f"{h.label} {h.temperature_celsius}°" for h in s.hourly)
        )
    if s.daily:
        lines.append("7-day forecast:")
        for d in s.daily:
            lines.append(f"  {d.label:<6} {d.high_celsius}° / {d.low_celsius}°")
    if s.last_error:
        lines.append(f"Last error: {s.last_error}")
    return "\n".join(lines)


def format_state_json(s: OrchestratorState) -> str:
    """JSON rendering for programmatic consumption."""
    return json.dumps(asdict(s), indent=2)


def format_saved_text(locations: Sequence[SavedLocation]) -> str:
    if not locations:
        return "No saved locations"
    return "\n".join(
        f"  {loc.city_name}: {int(loc.last_temperature_celsius)}°"
        for loc in locations
    )


def format_candidates_text(candidates: Sequence[PlaceCandidate]) -> str:
    if not candidates:
        return "No matches"
    return "\n".join(
        f"  {c.display_name} ({c.subtitle}) [{c.latitude:.4f}, {c.longitude:.4f}]"
        for c in candidates
    )
