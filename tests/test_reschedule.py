from datetime import date

import pytest

from fieldplanner.exceptions import InvalidConfiguration
from fieldplanner.models.domain import Client, Depot, GeoPoint, RecurrenceRule
from fieldplanner.services.geospatial import travel_minutes
from fieldplanner.services.planning.planner import build_route, generate_plan
from fieldplanner.services.reschedule.advisor import (
    apply_option,
    evaluate_insertion,
    is_scheduled,
    remove_client,
    suggest_reschedule,
)
from fieldplanner.services.routing.timeline import simulate_timeline, timeline_is_feasible
from fieldplanner.services.scheduling.visits import visit_for_client

DEPOT = Depot(name="Depot", location=GeoPoint(0.0, 0.0))
TARGET = date(2026, 10, 20)
OTHER = date(2026, 10, 21)


def _client(client_id: str, lat: float, lng: float, **kwargs) -> Client:
    return Client(client_id=client_id, name=f"Client {client_id}", location=GeoPoint(lat, lng), **kwargs)


def _route(team_id: int, *clients: Client):
    return build_route(team_id, DEPOT, simulate_timeline(DEPOT, [visit_for_client(client) for client in clients]))


def _two_team_plan():
    west = _client("west", 0, -0.05)
    east = _client("east", 0, 0.05)
    return {
        TARGET: (_route(1, west), _route(2, east)),
        OTHER: (_route(1, west), _route(2)),
    }


def test_empty_date_offers_every_team_at_index_zero():
    client = _client("new", 0, 0.02)
    options = suggest_reschedule({}, TARGET, DEPOT, 3, client)

    assert [(option.team_id, option.index) for option in options] == [(1, 0), (2, 0), (3, 0)]
    leg = travel_minutes(DEPOT.location, client.location)
    assert all(option.added_minutes == pytest.approx(leg) for option in options)


def test_strictly_cheapest_slot_is_ranked_first():
    client = _client("new", 0, 0.02)
    options = suggest_reschedule(_two_team_plan(), TARGET, DEPOT, 2, client)

    best = options[0]
    assert (best.team_id, best.index) == (2, 0)
    assert abs(best.added_minutes) < 1e-6
    assert [stop.client_id for stop in best.timeline] == ["new", "east"]
    assert best.inserted_stop.client_id == "new"


def test_options_are_limited_and_sorted():
    stops = [_client(f"S{i}", 0.01 * i, 0.01 * (i % 3)) for i in range(1, 7)]
    plan = {TARGET: (_route(1, *stops[:3]), _route(2, *stops[3:]))}
    client = _client("new", 0.015, 0.015)

    options = suggest_reschedule(plan, TARGET, DEPOT, 2, client)

    assert len(options) == 5
    added = [option.added_minutes for option in options]
    assert added == sorted(added)
    assert len(suggest_reschedule(plan, TARGET, DEPOT, 2, client, limit=20)) == 8


def test_feasibility_flag_is_reproducible_from_timeline():
    tight = _client("tight", 0, 0.5, duration_min=60, window_start="08:00", window_end="08:30")
    plan = {TARGET: (_route(1, tight), _route(2))}
    client = _client("new", 0, 0.4, duration_min=30, window_start="08:00", window_end="09:00")

    options = suggest_reschedule(plan, TARGET, DEPOT, 2, client, limit=10)

    assert {option.feasible for option in options} == {True, False}
    for option in options:
        replayed = simulate_timeline(DEPOT, [stop.visit for stop in option.timeline])
        assert timeline_is_feasible(replayed) == option.feasible


def test_suggest_requires_a_located_client():
    with pytest.raises(ValueError):
        suggest_reschedule({}, TARGET, DEPOT, 2, Client(client_id="x", name="x"))


def test_suggest_rejects_zero_teams():
    with pytest.raises(InvalidConfiguration):
        suggest_reschedule({}, TARGET, DEPOT, 0, _client("new", 0, 0.1))


def test_apply_replaces_only_the_target_date_and_team():
    plan = _two_team_plan()
    target_before = plan[TARGET]
    option = suggest_reschedule(plan, TARGET, DEPOT, 2, _client("new", 0, 0.02))[0]

    updated = apply_option(plan, TARGET, option, DEPOT, 2)

    assert updated is not plan
    assert plan[TARGET] is target_before
    assert updated[OTHER] is plan[OTHER]
    assert updated[TARGET][0] is plan[TARGET][0]
    route = updated[TARGET][1]
    assert route.stops == option.timeline
    assert route.total_minutes == pytest.approx(
        sum(stop.visit.duration_min for stop in route.stops)
        + travel_minutes(DEPOT.location, route.stops[0].location)
        + travel_minutes(route.stops[0].location, route.stops[1].location)
    )


def test_apply_on_missing_date_creates_the_day():
    option = suggest_reschedule({}, TARGET, DEPOT, 2, _client("new", 0, 0.02))[0]
    updated = apply_option({}, TARGET, option, DEPOT, 2)
    assert [len(route.stops) for route in updated[TARGET]] == [1, 0]


def test_apply_rejects_unknown_team():
    option = suggest_reschedule({}, TARGET, DEPOT, 4, _client("new", 0, 0.02))[-1]
    assert option.team_id == 4
    with pytest.raises(ValueError):
        apply_option(_two_team_plan(), TARGET, option, DEPOT, 2)


def test_evaluate_insertion_matches_suggestion():
    plan = _two_team_plan()
    client = _client("new", 0, 0.02)
    suggested = suggest_reschedule(plan, TARGET, DEPOT, 2, client, limit=10)
    for option in suggested:
        assert evaluate_insertion(plan, TARGET, DEPOT, 2, client, team_id=option.team_id, index=option.index) == option


@pytest.mark.parametrize("team_id, index", [(3, 0), (1, 2), (1, -1)])
def test_evaluate_insertion_rejects_bad_positions(team_id, index):
    with pytest.raises(ValueError):
        evaluate_insertion(_two_team_plan(), TARGET, DEPOT, 2, _client("new", 0, 0.02), team_id=team_id, index=index)


def test_remove_client_retimes_the_affected_route():
    first = _client("first", 0, 0.05, duration_min=60)
    second = _client("second", 0, 0.1, duration_min=60)
    plan = {TARGET: (_route(1, first, second), _route(2))}

    updated = remove_client(plan, TARGET, "first", DEPOT)

    (stop,) = updated[TARGET][0].stops
    assert stop.client_id == "second"
    assert stop.planned_start == pytest.approx(480 + travel_minutes(DEPOT.location, second.location))
    assert updated[TARGET][1] is plan[TARGET][1]
    assert len(plan[TARGET][0].stops) == 2


def test_remove_unknown_client_returns_the_same_plan():
    plan = _two_team_plan()
    assert remove_client(plan, TARGET, "missing", DEPOT) is plan
    assert remove_client(plan, date(2027, 1, 1), "west", DEPOT) is plan


def test_move_between_dates_on_a_generated_plan():
    # 2026-10-20 is a Tuesday; A is only due on Tuesdays
    clients = [_client("A", 0.01, 0.01, recurrence=RecurrenceRule(preferred_days=(2,))), _client("B", -0.01, 0.02)]
    plan = generate_plan(depot=DEPOT, clients=clients, start_date=TARGET, horizon_days=2, team_count=1)
    assert not is_scheduled(plan, OTHER, "A")

    without = remove_client(plan, TARGET, "A", DEPOT)
    option = suggest_reschedule(without, OTHER, DEPOT, 1, clients[0])[0]
    moved = apply_option(without, OTHER, option, DEPOT, 1)

    assert [stop.client_id for stop in moved[TARGET][0].stops] == ["B"]
    assert sorted(stop.client_id for stop in moved[OTHER][0].stops) == ["A", "B"]
    assert is_scheduled(moved, OTHER, "A")
    assert not is_scheduled(moved, TARGET, "A")


def test_is_scheduled():
    plan = _two_team_plan()
    assert is_scheduled(plan, TARGET, "east")
    assert not is_scheduled(plan, OTHER, "east")
    assert not is_scheduled(plan, date(2027, 1, 1), "west")


def test_zero_limit_returns_no_options():
    assert suggest_reschedule(_two_team_plan(), TARGET, DEPOT, 2, _client("new", 0, 0.02), limit=0) == []


def test_unlocated_depot_is_rejected():
    nowhere = Depot(name="Nowhere")
    client = _client("new", 0, 0.02)
    plan = _two_team_plan()
    option = suggest_reschedule(plan, TARGET, DEPOT, 2, client)[0]

    with pytest.raises(InvalidConfiguration):
        suggest_reschedule(plan, TARGET, nowhere, 2, client)
    with pytest.raises(InvalidConfiguration):
        evaluate_insertion(plan, TARGET, nowhere, 2, client, team_id=1, index=0)
    with pytest.raises(InvalidConfiguration):
        apply_option(plan, TARGET, option, nowhere, 2)
    with pytest.raises(InvalidConfiguration):
        remove_client(plan, TARGET, "west", nowhere)
