"""Weather orchestrator: owns observable state, debounced search and fetch lifecycle.

All state mutations happen on the event loop that runs the orchestrator.
Blocking network and SQLite calls are pushed to worker threads with
asyncio.to_thread and their results applied back on the loop, so callers
never block and observers always see whole-state replacements.

Search: every keystroke bumps a generation counter and cancels the pending
debounce task. Results are published only if their generation is still the
newest. Fetch: each call captures a generation token; a fetch that was
superseded by a newer call drops its results instead of publishing them.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import replace
from typing import Any

from nimbus.config.schema import NimbusConfig
from nimbus.ingest.forecast_client import ForecastClient
from nimbus.ingest.geocoding_client import GeocodingClient
from nimbus.models.common import epoch_millis, local_time_label
from nimbus.models.location import SavedLocation
from nimbus.models.state import OrchestratorState
from nimbus.storage.location_store import LocationStore

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_LATITUDE = 9.93
DEFAULT_LONGITUDE = 76.26

StateObserver = Callable[[OrchestratorState], None]


class WeatherOrchestrator:
    def __init__(
        self,
        forecast: ForecastClient,
        geocoding: GeocodingClient,
        store: LocationStore,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        search_limit: int = 5,
        default_latitude: float = DEFAULT_LATITUDE,
        default_longitude: float = DEFAULT_LONGITUDE,
    ):
        self.forecast = forecast
        self.geocoding = geocoding
        self.store = store
        self.debounce_seconds = debounce_seconds
        self.search_limit = search_limit
        self.default_latitude = default_latitude
        self.default_longitude = default_longitude

        self._state = OrchestratorState()
        self._observers: list[StateObserver] = []
        self._tasks: set[asyncio.Task] = set()
        self._search_task: asyncio.Task | None = None
        self._search_generation = 0
        self._fetch_generation = 0

    @classmethod
    def from_config(
        cls, config: NimbusConfig, store: LocationStore
    ) -> "WeatherOrchestrator":
        p = config.providers
        forecast = ForecastClient(
            base_url=p.forecast_base_url,
            timeout=p.timeout,
            max_retries=p.max_retries,
            retry_base_delay=p.retry_base_delay,
        )
        geocoding = GeocodingClient(
            search_base_url=p.geocoding_base_url,
            reverse_base_url=p.reverse_base_url,
            user_agent=p.user_agent,
            timeout=p.timeout,
        )
        return cls(
            forecast,
            geocoding,
            store,
            debounce_seconds=config.search.debounce_ms / 1000,
            search_limit=config.search.result_limit,
            default_latitude=config.startup.default_latitude,
            default_longitude=config.startup.default_longitude,
        )

    @property
    def state(self) -> OrchestratorState:
        return self._state

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register an observer called with every new state. Returns an unsubscribe callable."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def _publish(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for observer in list(self._observers):
            try:
                observer(self._state)
            except Exception:
                logger.exception("State observer %r failed", observer)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # -- startup ------------------------------------------------------------

    def load_cached(self) -> None:
        """Publish the newest cached location and the saved list for offline display."""
        recent = self.store.get_most_recent()
        changes: dict[str, Any] = {"saved_locations": tuple(self.store.list_all())}
        if recent is not None:
            changes.update(
                city_name=recent.city_name,
                temperature_celsius=recent.last_temperature_celsius,
                is_daytime=recent.was_daytime,
            )
            logger.info("Loaded cached weather for %s", recent.city_name)
        self._publish(**changes)

    def start(self) -> asyncio.Task:
        """Load the offline cache now, then fetch the default coordinate."""
        self.load_cached()
        return self.fetch(self.default_latitude, self.default_longitude)

    # -- search -------------------------------------------------------------

    def search(self, query: str) -> asyncio.Task | None:
        """Handle one keystroke of search-as-you-type.

        Blank input clears the results immediately. Anything else restarts
        the debounce timer; the returned task completes when the query has
        run (or is cancelled by a later keystroke).
        """
        if self._search_task is not None:
            self._search_task.cancel()
            self._search_task = None
        self._search_generation += 1

        if not query.strip():
            self._publish(search_results=())
            return None

        self._search_task = self._spawn(
            self._run_search(query, self._search_generation)
        )
        return self._search_task

    async def _run_search(self, query: str, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        results = await asyncio.to_thread(
            self.geocoding.search, query, self.search_limit
        )
        if generation != self._search_generation:
            logger.debug("Discarding stale search results for %r", query)
            return
        self._publish(search_results=tuple(results))

    # -- fetch --------------------------------------------------------------

    def fetch(
        self, latitude: float, longitude: float, name: str | None = None
    ) -> asyncio.Task:
        self._fetch_generation += 1
        return self._spawn(
            self._run_fetch(latitude, longitude, name, self._fetch_generation)
        )

    async def _run_fetch(
        self,
        latitude: float,
        longitude: float,
        name: str | None,
        generation: int,
    ) -> None:
        self._publish(loading=True)
        try:
            snapshot = await asyncio.to_thread(
                self.forecast.fetch, latitude, longitude
            )
            if name is None:
                name = await asyncio.to_thread(
                    self.geocoding.reverse_lookup, latitude, longitude
                )
            if generation != self._fetch_generation:
                logger.info(
                    "Dropping superseded forecast for (%s, %s)", latitude, longitude
                )
                return

            self._publish(
                city_name=name,
                temperature_celsius=snapshot.temperature_celsius,
                is_daytime=snapshot.is_daytime,
                utc_offset_seconds=snapshot.utc_offset_seconds,
                local_time=local_time_label(snapshot.utc_offset_seconds),
                hourly=snapshot.hourly,
                daily=snapshot.daily,
                last_error=None,
            )
            await asyncio.to_thread(
                self.store.upsert,
                SavedLocation(
                    city_name=name,
                    last_temperature_celsius=snapshot.temperature_celsius,
                    was_daytime=snapshot.is_daytime,
                    saved_at_epoch_millis=epoch_millis(),
                ),
            )
            await self.refresh_saved_list()
        except Exception as e:
            logger.exception(
                "Failed to fetch forecast for (%s, %s)", latitude, longitude
            )
            if generation == self._fetch_generation:
                self._publish(last_error=str(e) or type(e).__name__)
        finally:
            if generation == self._fetch_generation:
                self._publish(loading=False)

    # -- saved locations ----------------------------------------------------

    async def refresh_saved_list(self) -> None:
        saved = await asyncio.to_thread(self.store.list_all)
        self._publish(saved_locations=tuple(saved))

    def delete_location(self, location: SavedLocation) -> asyncio.Task:
        return self._spawn(self._run_delete(location))

    async def _run_delete(self, location: SavedLocation) -> None:
        removed = await asyncio.to_thread(self.store.delete, location)
        if not removed:
            logger.warning("No saved location named %s", location.city_name)
        await self.refresh_saved_list()

    def select_saved_location(self, name: str) -> asyncio.Task:
        """Re-fetch a saved city by resolving its name back to coordinates.

        The selection counts as a fetch from the moment it is made, so a
        fetch issued while the name is still resolving supersedes it.
        """
        self._fetch_generation += 1
        return self._spawn(self._run_select(name, self._fetch_generation))

    async def _run_select(self, name: str, generation: int) -> None:
        candidate = await asyncio.to_thread(self.geocoding.resolve_by_name, name)
        if generation != self._fetch_generation:
            logger.info("Dropping superseded selection of %s", name)
            return
        if candidate is None:
            logger.warning("Could not resolve saved location %s", name)
            return
        await self._run_fetch(candidate.latitude, candidate.longitude, name, generation)

    # -- lifecycle ----------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait until every pending search, fetch and delete has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await self.wait_idle()
