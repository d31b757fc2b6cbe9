import random

import pytest

from fieldplanner.exceptions import InvalidConfiguration
from fieldplanner.models.domain import Depot, GeoPoint, Visit
from fieldplanner.services.partitioning.sweep import partition_by_angle


def _depot(lat: float = 0.0, lng: float = 0.0) -> Depot:
    return Depot(name="Depot", location=GeoPoint(lat, lng))


def _visit(client_id: str, lat: float, lng: float) -> Visit:
    return Visit(
        client_id=client_id,
        name=client_id,
        address="",
        location=GeoPoint(lat, lng),
        duration_min=30,
        window_start=480,
        window_end=1020,
    )


def _random_visits(count: int, seed: int = 7) -> list[Visit]:
    rng = random.Random(seed)
    return [_visit(f"V{i}", rng.uniform(-0.5, 0.5), rng.uniform(-0.5, 0.5)) for i in range(count)]


@pytest.mark.parametrize("team_count", [0, -1])
def test_rejects_non_positive_team_count(team_count):
    with pytest.raises(InvalidConfiguration):
        partition_by_angle(_depot(), [_visit("A", 0, 1)], team_count)


def test_rejects_unlocated_depot():
    with pytest.raises(InvalidConfiguration):
        partition_by_angle(Depot(name="Nowhere"), [], 2)


def test_invalid_configuration_is_a_value_error():
    assert issubclass(InvalidConfiguration, ValueError)


@pytest.mark.parametrize("count, team_count", [(10, 3), (7, 7), (1, 4), (0, 2), (25, 4)])
def test_groups_cover_all_visits_with_balanced_sizes(count, team_count):
    visits = _random_visits(count)
    groups = partition_by_angle(_depot(), visits, team_count)

    assert len(groups) == team_count
    flattened = [visit.client_id for group in groups for visit in group]
    assert sorted(flattened) == sorted(visit.client_id for visit in visits)
    sizes = [len(group) for group in groups]
    assert max(sizes) - min(sizes) <= 1


def test_extra_teams_get_empty_groups():
    groups = partition_by_angle(_depot(), [_visit("E", 0, 1), _visit("W", 0, -1)], 5)
    assert [len(group) for group in groups] == [1, 1, 0, 0, 0]


def test_opposite_clients_land_in_different_groups():
    groups = partition_by_angle(_depot(), [_visit("W", 0, -1), _visit("E", 0, 1)], 2)
    assert [visit.client_id for visit in groups[0]] == ["E"]
    assert [visit.client_id for visit in groups[1]] == ["W"]


def test_rank_by_angle_is_dealt_round_robin():
    visits = [_visit("N", 1, 0), _visit("E", 0, 1), _visit("S", -1, 0), _visit("W", 0, -1)]
    groups = partition_by_angle(_depot(), visits, 2)
    assert [[visit.client_id for visit in group] for group in groups] == [["S", "N"], ["E", "W"]]


def test_equal_angles_keep_input_order():
    visits = [_visit("far", 0, 2), _visit("near", 0, 1)]
    groups = partition_by_angle(_depot(), visits, 1)
    assert [visit.client_id for visit in groups[0]] == ["far", "near"]
