"""Insertion search for moving a client onto another date.

Every team route on the target date is tried at every insertion index. Each
candidate is scored by the extra drive time it adds and checked against the
time windows of all stops on the resulting route. The search is exhaustive
over insertion points; day-level stop counts keep it small.
"""

from __future__ import annotations

import logging
from datetime import date

from ...config import settings
from ...exceptions import InvalidConfiguration
from ...models.domain import Client, Depot, Plan, RescheduleOption, Route, Visit
from ..planning.planner import build_route, empty_routes
from ..routing.sequencer import route_drive_minutes
from ..routing.timeline import simulate_timeline, timeline_is_feasible
from ..scheduling.visits import visit_for_client

logger = logging.getLogger(__name__)


def _require_depot(depot: Depot) -> None:
    if depot.location is None:
        raise InvalidConfiguration(f"Depot '{depot.name}' has no location.")


def is_scheduled(plan: Plan, day: date, client_id: str) -> bool:
    return any(stop.client_id == client_id for route in plan.get(day, ()) for stop in route.stops)


def routes_for_date(plan: Plan, day: date, depot: Depot, team_count: int) -> tuple[Route, ...]:
    """Existing routes for ``day`` or one empty route per team."""
    routes = plan.get(day)
    if routes is None:
        return empty_routes(depot, team_count)
    return routes


def _insertion_option(depot: Depot, route: Route, visit: Visit, index: int) -> RescheduleOption:
    current = [stop.visit for stop in route.stops]
    candidate = current[:index] + [visit] + current[index:]
    # depot return left out on both sides
    added = route_drive_minutes(depot, candidate) - route_drive_minutes(depot, current)
    timeline = simulate_timeline(depot, candidate)
    return RescheduleOption(
        team_id=route.team_id,
        index=index,
        added_minutes=added,
        feasible=timeline_is_feasible(timeline),
        timeline=tuple(timeline),
    )


def suggest_reschedule(
    plan: Plan,
    target_date: date,
    depot: Depot,
    team_count: int,
    client: Client,
    limit: int | None = None,
) -> list[RescheduleOption]:
    """Rank the cheapest places to insert ``client`` on ``target_date``.

    Options are sorted by ``added_minutes`` with ties kept in enumeration
    order (team, then index). Infeasible options are still returned; their
    ``feasible`` flag is a ranking signal, not an error.
    """
    if team_count < 1:
        raise InvalidConfiguration("team_count must be >= 1")
    _require_depot(depot)
    if limit is None:
        limit = settings.max_reschedule_options
    visit = visit_for_client(client)
    routes = routes_for_date(plan, target_date, depot, team_count)

    options: list[RescheduleOption] = []
    for route in routes:
        for index in range(len(route.stops) + 1):
            options.append(_insertion_option(depot, route, visit, index))

    logger.info(
        f"Evaluated {len(options)} insertions for client {client.client_id} on {target_date.isoformat()}"
    )
    options.sort(key=lambda option: option.added_minutes)
    return options[:limit]


def apply_option(
    plan: Plan,
    target_date: date,
    option: RescheduleOption,
    depot: Depot,
    team_count: int,
) -> Plan:
    """Return a new plan with the option's route replacing the team's route.

    Only the ``target_date`` entry is rebuilt; other dates are shared with
    the input plan.
    """
    _require_depot(depot)
    routes = routes_for_date(plan, target_date, depot, team_count)
    if not any(route.team_id == option.team_id for route in routes):
        raise ValueError(f"Team {option.team_id} has no route on {target_date.isoformat()}.")

    updated = tuple(
        build_route(route.team_id, depot, option.timeline) if route.team_id == option.team_id else route
        for route in routes
    )
    new_plan: Plan = dict(plan)
    new_plan[target_date] = updated
    return new_plan


def remove_client(plan: Plan, day: date, client_id: str, depot: Depot, day_start: int | None = None) -> Plan:
    """Return a new plan without ``client_id`` on ``day``.

    Routes that lose a stop are re-timed from the depot; untouched routes
    are kept as-is.
    """
    _require_depot(depot)
    routes = plan.get(day)
    if not routes:
        return plan

    updated: list[Route] = []
    removed = 0
    for route in routes:
        kept = [stop.visit for stop in route.stops if stop.client_id != client_id]
        if len(kept) == len(route.stops):
            updated.append(route)
            continue
        removed += len(route.stops) - len(kept)
        updated.append(build_route(route.team_id, depot, simulate_timeline(depot, kept, day_start=day_start)))

    if not removed:
        return plan
    logger.info(f"Removed client {client_id} from {removed} stop(s) on {day.isoformat()}")
    new_plan: Plan = dict(plan)
    new_plan[day] = tuple(updated)
    return new_plan


def evaluate_insertion(
    plan: Plan,
    target_date: date,
    depot: Depot,
    team_count: int,
    client: Client,
    *,
    team_id: int,
    index: int,
) -> RescheduleOption:
    """Score a single insertion chosen by the caller."""
    _require_depot(depot)
    visit = visit_for_client(client)
    routes = routes_for_date(plan, target_date, depot, team_count)
    route = next((route for route in routes if route.team_id == team_id), None)
    if route is None:
        raise ValueError(f"Team {team_id} has no route on {target_date.isoformat()}.")
    if not 0 <= index <= len(route.stops):
        raise ValueError(f"Insertion index {index} is outside 0..{len(route.stops)} for team {team_id}.")
    return _insertion_option(depot, route, visit, index)
