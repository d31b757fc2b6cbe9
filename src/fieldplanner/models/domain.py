"""Domain models for depots, clients and the plans built from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Tuple


class Frequency:
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(slots=True)
class Depot:
    """Single origin shared by every team on every day."""

    name: str
    address: str = ""
    location: Optional[GeoPoint] = None


@dataclass(frozen=True, slots=True)
class RecurrenceRule:
    """How often a client is visited.

    ``preferred_days`` holds weekday indexes with 0=Sunday..6=Saturday. An
    empty tuple means any weekday is acceptable.
    """

    frequency: str = Frequency.WEEKLY
    preferred_days: Tuple[int, ...] = ()


@dataclass(slots=True)
class Client:
    """Represents a recurring service location supplied by the caller."""

    client_id: str
    name: str
    address: str = ""
    location: Optional[GeoPoint] = None
    recurrence: RecurrenceRule = field(default_factory=RecurrenceRule)
    duration_min: Optional[int] = None
    window_start: Optional[str] = None
    window_end: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Visit:
    """A concrete (client, date) obligation.

    Values are copied from the client when the visit is built so later edits
    to the client never alter an existing plan.
    """

    client_id: str
    name: str
    address: str
    location: GeoPoint
    duration_min: int
    window_start: int
    window_end: int


@dataclass(frozen=True, slots=True)
class Stop:
    visit: Visit
    planned_start: float
    planned_end: float

    @property
    def client_id(self) -> str:
        return self.visit.client_id

    @property
    def location(self) -> GeoPoint:
        return self.visit.location

    @property
    def window_start(self) -> int:
        return self.visit.window_start

    @property
    def window_end(self) -> int:
        return self.visit.window_end


@dataclass(frozen=True, slots=True)
class Route:
    team_id: int
    depot: Depot
    stops: Tuple[Stop, ...] = ()
    total_minutes: float = 0.0


Plan = Dict[date, Tuple[Route, ...]]


@dataclass(frozen=True, slots=True)
class RescheduleOption:
    team_id: int
    index: int
    added_minutes: float
    feasible: bool
    timeline: Tuple[Stop, ...]

    @property
    def inserted_stop(self) -> Stop:
        return self.timeline[self.index]
