from datetime import date

import pytest

from fieldplanner.models.domain import Client, GeoPoint, RecurrenceRule
from fieldplanner.services.scheduling.visits import (
    build_daily_visits,
    find_unlocated_clients,
    format_clock,
    parse_clock,
    resolve_duration,
    resolve_window,
    visit_for_client,
)

ANCHOR = date(2026, 10, 18)
MONDAY = date(2026, 10, 19)


def _client(client_id: str, location: GeoPoint | None = GeoPoint(47.66, -117.42), **kwargs) -> Client:
    return Client(client_id=client_id, name=f"Client {client_id}", location=location, **kwargs)


@pytest.mark.parametrize(
    "value, expected",
    [("09:30", 570), ("9:05", 545), ("00:00", 0), ("23:59", 1439), (" 17:00 ", 1020)],
)
def test_parse_clock_accepts_valid_times(value, expected):
    assert parse_clock(value) == expected


@pytest.mark.parametrize("value", [None, "", "24:00", "12:60", "abc", "9", "1:2:3", "-1:30"])
def test_parse_clock_rejects_malformed_times(value):
    assert parse_clock(value) is None


def test_format_clock_rounds_and_clamps():
    assert format_clock(630) == "10:30"
    assert format_clock(540.4) == "09:00"
    assert format_clock(59.6) == "01:00"
    assert format_clock(-5) == "00:00"


def test_window_defaults_apply_per_bound():
    assert resolve_window(_client("A")) == (480, 1020)
    assert resolve_window(_client("B", window_start="10:00")) == (600, 1020)
    assert resolve_window(_client("C", window_start="bogus", window_end="12:30")) == (480, 750)


@pytest.mark.parametrize("duration, expected", [(None, 60), (0, 60), (-5, 60), (90, 90)])
def test_duration_defaults_when_missing_or_not_positive(duration, expected):
    assert resolve_duration(_client("A", duration_min=duration)) == expected


def test_visit_for_client_requires_location():
    with pytest.raises(ValueError):
        visit_for_client(_client("A", location=None))


def test_build_daily_visits_skips_unlocated_and_not_due_clients():
    clients = [
        _client("A"),
        _client("B", location=None),
        _client("C", recurrence=RecurrenceRule(preferred_days=(3,))),
        _client("D", recurrence=RecurrenceRule(preferred_days=(1,))),
    ]
    visits = build_daily_visits(MONDAY, clients, ANCHOR)
    assert [visit.client_id for visit in visits] == ["A", "D"]


def test_visits_are_snapshots_of_the_client():
    client = _client("A", duration_min=45, window_start="09:00")
    visit = build_daily_visits(MONDAY, [client], ANCHOR)[0]

    client.name = "Renamed"
    client.duration_min = 120
    client.location = GeoPoint(0, 0)

    assert visit.name == "Client A"
    assert visit.duration_min == 45
    assert visit.window_start == 540
    assert visit.location == GeoPoint(47.66, -117.42)


def test_find_unlocated_clients():
    clients = [_client("A"), _client("B", location=None), _client("C", location=None)]
    assert find_unlocated_clients(clients) == ["B", "C"]
