"""Nearest-neighbour sequencing of a single team's visits.

The sequencer builds a single-vehicle tour starting at the depot by always
moving to the closest remaining visit. It never backtracks, so the result is
a heuristic tour rather than an optimal one; per-day clusters are small
enough that the O(n^2) scan is not a concern.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

from ...models.domain import Depot, GeoPoint, Stop, Visit
from ..geospatial import travel_minutes

Located = TypeVar("Located", Visit, Stop)


def order_by_nearest(depot: Depot, visits: Sequence[Visit]) -> list[Visit]:
    """Return ``visits`` in nearest-neighbour order from the depot.

    Ties go to the candidate that appears first in the remaining list.
    """
    remaining = list(visits)
    ordered: list[Visit] = []
    current: GeoPoint = depot.location
    while remaining:
        best_index = 0
        best_cost = float("inf")
        for index, candidate in enumerate(remaining):
            cost = travel_minutes(current, candidate.location)
            if cost < best_cost:
                best_cost = cost
                best_index = index
        chosen = remaining.pop(best_index)
        ordered.append(chosen)
        current = chosen.location
    return ordered


def route_drive_minutes(depot: Depot, stops: Sequence[Located], include_return: bool = False) -> float:
    """Sum travel time from the depot through ``stops`` in order."""
    total = 0.0
    current = depot.location
    for stop in stops:
        total += travel_minutes(current, stop.location)
        current = stop.location
    if include_return and stops:
        total += travel_minutes(current, depot.location)
    return total
