"""Angular sweep partitioning of a day's visits across teams."""

from __future__ import annotations

from typing import Sequence

from ...exceptions import InvalidConfiguration
from ...models.domain import Depot, Visit
from ..geospatial import planar_angle


def partition_by_angle(depot: Depot, visits: Sequence[Visit], team_count: int) -> list[list[Visit]]:
    """Split visits into ``team_count`` groups around the depot.

    Visits are sorted by their planar angle around the depot and the visit at
    rank ``i`` goes to group ``i % team_count``. Group sizes differ by at most
    one; trailing groups stay empty when there are fewer visits than teams.
    """
    if team_count < 1:
        raise InvalidConfiguration("team_count must be >= 1")
    if depot.location is None:
        raise InvalidConfiguration(f"Depot '{depot.name}' has no location.")

    ordered = sorted(visits, key=lambda visit: planar_angle(depot.location, visit.location))
    groups: list[list[Visit]] = [[] for _ in range(team_count)]
    for rank, visit in enumerate(ordered):
        groups[rank % team_count].append(visit)
    return groups
