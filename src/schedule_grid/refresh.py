"""Keep a grid in sync with the schedule source.

ScheduleQuery caches the latest snapshot per filter set and refetches it
once it is stale or invalidated. LiveSchedule wires a query to a push
channel: every "data-updated" event invalidates the cache so the next grid
is built from fresh data.

Fetches tagged with an older generation than the current one are dropped
instead of overwriting newer data.
"""

import threading
import time
from typing import Any, Callable, Iterable, Protocol, Sequence

from src.schedule_grid.config import MeridiemPolicy, get_settings
from src.schedule_grid.grid import reconcile
from src.schedule_grid.logging import get_logger
from src.schedule_grid.models import ScheduleEntry, ScheduleGrid, TimeSlot

log = get_logger(__name__)

SCHEDULES_UPDATED = "data-updated:schedules"

Handler = Callable[[Any], None]
Unsubscribe = Callable[[], None]
FilterKey = tuple[tuple[str, str], ...]


class Subscriber(Protocol):
    """Anything that can deliver named events to handlers."""

    def subscribe(self, event_name: str, handler: Handler) -> Unsubscribe: ...


class LocalEventBus:
    """In-process event bus implementing Subscriber."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_name: str, handler: Handler) -> Unsubscribe:
        with self._lock:
            self._handlers.setdefault(event_name, []).append(handler)

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(event_name, [])
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def publish(self, event_name: str, payload: Any = None) -> int:
        """Call every handler of an event. Returns the number of handlers called."""
        with self._lock:
            handlers = list(self._handlers.get(event_name, []))
        for handler in handlers:
            handler(payload)
        return len(handlers)


def filter_key(filters: dict[str, Any]) -> FilterKey:
    """Hashable cache key for a filter set; empty values are ignored."""
    return tuple(sorted((k, str(v)) for k, v in filters.items() if v))


class _Snapshot:
    __slots__ = ("entries", "fetched_at", "generation")

    def __init__(self, entries: tuple[ScheduleEntry, ...], fetched_at: float, generation: int):
        self.entries = entries
        self.fetched_at = fetched_at
        self.generation = generation


class ScheduleQuery:
    """Cached schedule fetches keyed by filter set."""

    def __init__(
        self,
        fetch: Callable[..., Iterable[ScheduleEntry]],
        *,
        stale_time: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize ScheduleQuery.

        Args:
            fetch: Called with the filters as keyword arguments, e.g.
                ScheduleClient.fetch_schedules.
            stale_time: Seconds a snapshot is served before it is refetched
                (default: SCHEDULE_STALE_TIME_SECONDS).
            clock: Monotonic time source.
        """
        self._fetch = fetch
        self.stale_time = stale_time if stale_time is not None else get_settings().stale_time_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshots: dict[FilterKey, _Snapshot] = {}
        self._generations: dict[FilterKey, int] = {}
        self._global_generation = 0

    def _generation(self, key: FilterKey) -> int:
        return self._global_generation + self._generations.get(key, 0)

    def _is_fresh(self, snapshot: _Snapshot | None, key: FilterKey) -> bool:
        if snapshot is None or snapshot.generation != self._generation(key):
            return False
        return self._clock() - snapshot.fetched_at < self.stale_time

    def get(self, **filters: Any) -> tuple[ScheduleEntry, ...]:
        """Return the snapshot for these filters, refetching if needed."""
        key = filter_key(filters)
        with self._lock:
            snapshot = self._snapshots.get(key)
            if self._is_fresh(snapshot, key):
                return snapshot.entries
            generation = self._generation(key)

        params = dict(key)
        entries = tuple(self._fetch(**params))

        with self._lock:
            if generation != self._generation(key):
                # Invalidated while the fetch was in flight
                log.debug("snapshot_discarded", filters=params, generation=generation)
                return entries
            current = self._snapshots.get(key)
            if current is None or current.generation <= generation:
                self._snapshots[key] = _Snapshot(entries, self._clock(), generation)
        log.debug("snapshot_refreshed", filters=params, count=len(entries))
        return entries

    def invalidate(self, filters: dict[str, Any] | None = None) -> None:
        """Mark one filter set, or every snapshot when filters is None, as outdated."""
        with self._lock:
            if filters is None:
                self._global_generation += 1
            else:
                key = filter_key(filters)
                self._generations[key] = self._generations.get(key, 0) + 1
        log.debug("snapshot_invalidated", filters=filters)


class LiveSchedule:
    """A ScheduleQuery kept current by push events."""

    def __init__(
        self,
        query: ScheduleQuery,
        subscriber: Subscriber,
        *,
        events: Sequence[str] = (SCHEDULES_UPDATED,),
        meridiem_policy: MeridiemPolicy = "24hour",
    ) -> None:
        self.query = query
        self.subscriber = subscriber
        self.events = tuple(events)
        self.meridiem_policy = meridiem_policy
        self._unsubscribers: list[Unsubscribe] = []

    @property
    def running(self) -> bool:
        return bool(self._unsubscribers)

    def _on_update(self, payload: Any) -> None:
        log.info("schedules_updated", payload=payload)
        self.query.invalidate()

    def start(self) -> None:
        """Subscribe to the update events. Calling it twice has no effect."""
        if self.running:
            return
        for event_name in self.events:
            self._unsubscribers.append(self.subscriber.subscribe(event_name, self._on_update))

    def stop(self) -> None:
        """Unsubscribe from every event."""
        while self._unsubscribers:
            self._unsubscribers.pop()()

    def grid(
        self, slots: Sequence[TimeSlot | str], days: Iterable[str], **filters: Any
    ) -> ScheduleGrid:
        """Reconcile the current snapshot for these filters."""
        entries = self.query.get(**filters)
        return reconcile(slots, entries, days, meridiem_policy=self.meridiem_policy)
