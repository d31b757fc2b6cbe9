"""Day and horizon planning built from the scheduling and routing stages."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from typing import Sequence

from ...config import settings
from ...exceptions import InvalidConfiguration
from ...models.domain import Client, Depot, Plan, Route, Stop, Visit
from ..partitioning.sweep import partition_by_angle
from ..routing.sequencer import order_by_nearest, route_drive_minutes
from ..routing.timeline import simulate_timeline
from ..scheduling.recurrence import start_of_week
from ..scheduling.visits import build_daily_visits

logger = logging.getLogger(__name__)


def route_total_minutes(depot: Depot, stops: Sequence[Stop], include_return: bool | None = None) -> float:
    """Drive time plus service time for a route."""
    if include_return is None:
        include_return = settings.include_return_in_totals
    drive = route_drive_minutes(depot, stops, include_return=include_return)
    service = sum(stop.visit.duration_min for stop in stops)
    return drive + service


def build_route(team_id: int, depot: Depot, stops: Sequence[Stop]) -> Route:
    return Route(
        team_id=team_id,
        depot=depot,
        stops=tuple(stops),
        total_minutes=route_total_minutes(depot, stops),
    )


def empty_routes(depot: Depot, team_count: int) -> tuple[Route, ...]:
    if team_count < 1:
        raise InvalidConfiguration("team_count must be >= 1")
    return tuple(Route(team_id=team_id, depot=depot) for team_id in range(1, team_count + 1))


def plan_day(depot: Depot, visits: Sequence[Visit], team_count: int, day_start: int | None = None) -> tuple[Route, ...]:
    """Partition, sequence and time one day's visits, one route per team."""
    clusters = partition_by_angle(depot, visits, team_count)
    routes: list[Route] = []
    for team_id, cluster in enumerate(clusters, start=1):
        ordered = order_by_nearest(depot, cluster)
        timeline = simulate_timeline(depot, ordered, day_start=day_start)
        routes.append(build_route(team_id, depot, timeline))
    return tuple(routes)


def horizon_dates(start_date: date, horizon_days: int) -> list[date]:
    return [start_date + timedelta(days=offset) for offset in range(horizon_days)]


def _validate_request(depot: Depot, horizon_days: int, team_count: int) -> None:
    if team_count < 1:
        raise InvalidConfiguration("team_count must be >= 1")
    if horizon_days < 1:
        raise InvalidConfiguration("horizon_days must be >= 1")
    if depot.location is None:
        raise InvalidConfiguration(f"Depot '{depot.name}' has no location.")


def generate_plan(
    *,
    depot: Depot,
    clients: Sequence[Client],
    start_date: date,
    horizon_days: int,
    team_count: int,
    max_workers: int | None = None,
) -> Plan:
    """Plan every date in ``[start_date, start_date + horizon_days)``.

    Dates are planned independently. With ``max_workers`` above one the days
    run on a thread pool; the returned mapping is ordered by date either way.
    """
    _validate_request(depot, horizon_days, team_count)
    workers = max_workers or settings.planning_max_workers
    week_anchor = start_of_week(start_date)
    clients = tuple(clients)
    dates = horizon_dates(start_date, horizon_days)

    def plan_for(day: date) -> tuple[Route, ...]:
        visits = build_daily_visits(day, clients, week_anchor)
        return plan_day(depot, visits, team_count)

    if workers > 1 and len(dates) > 1:
        with ThreadPoolExecutor(max_workers=min(workers, len(dates))) as executor:
            day_routes = list(executor.map(plan_for, dates))
    else:
        day_routes = [plan_for(day) for day in dates]

    plan: Plan = dict(zip(dates, day_routes))
    total_stops = sum(len(route.stops) for routes in plan.values() for route in routes)
    logger.info(
        f"Planned {len(dates)} days from {start_date.isoformat()} for {team_count} teams: {total_stops} stops"
    )
    return plan
