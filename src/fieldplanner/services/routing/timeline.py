"""Arrival and service time simulation for an ordered stop list."""

from __future__ import annotations

from typing import Iterable, Sequence

from ...config import settings
from ...models.domain import Depot, Stop, Visit
from ..geospatial import travel_minutes


def simulate_timeline(depot: Depot, visits: Sequence[Visit], day_start: int | None = None) -> list[Stop]:
    """Annotate visits with planned start/end minutes, preserving order.

    Teams leave the depot at ``day_start``. Arriving before a window opens
    means idling until it opens; service never starts early. Window ends are
    not enforced here, see :func:`timeline_is_feasible`.
    """
    clock = float(settings.day_start_minutes if day_start is None else day_start)
    position = depot.location
    timeline: list[Stop] = []
    for visit in visits:
        arrival = clock + travel_minutes(position, visit.location)
        start = max(arrival, float(visit.window_start))
        end = start + visit.duration_min
        timeline.append(Stop(visit=visit, planned_start=start, planned_end=end))
        clock = end
        position = visit.location
    return timeline


def stop_is_feasible(stop: Stop, grace_minutes: int | None = None) -> bool:
    grace = settings.feasibility_grace_minutes if grace_minutes is None else grace_minutes
    return stop.planned_start >= stop.window_start and stop.planned_end <= stop.window_end + grace


def timeline_is_feasible(stops: Iterable[Stop], grace_minutes: int | None = None) -> bool:
    return all(stop_is_feasible(stop, grace_minutes) for stop in stops)
