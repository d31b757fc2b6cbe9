"""In-memory store of generated plans with per-date write serialization."""

from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from threading import Lock
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..exceptions import PlanNotFound, VersionConflict
from ..models.domain import Client, Depot, Plan, Route

IdentifierSource = Callable[[], str]


def uuid_ids() -> str:
    return uuid.uuid4().hex


def sequential_ids(prefix: str = "plan") -> IdentifierSource:
    """Deterministic identifiers: ``plan-1``, ``plan-2``..."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@dataclass(slots=True)
class PlanRecord:
    plan_id: str
    depot: Depot
    clients: Tuple[Client, ...]
    team_count: int
    start_date: date
    horizon_days: int
    plan: Plan
    versions: Dict[date, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).replace(microsecond=0).isoformat()
    )

    def version_of(self, day: date) -> int:
        return self.versions.get(day, 0)

    def client_by_id(self, client_id: str) -> Optional[Client]:
        return next((client for client in self.clients if client.client_id == client_id), None)


class PlanStore:
    """Holds plans for the API layer.

    Reads return the current record. Date entries are only replaced through
    :meth:`update_day`, which runs the caller's update under a lock scoped to
    that (plan, date) pair and bumps the entry's version.
    """

    def __init__(self, id_source: IdentifierSource | None = None) -> None:
        self._id_source = id_source or uuid_ids
        self._records: Dict[str, PlanRecord] = {}
        self._lock = Lock()
        self._day_locks: Dict[Tuple[str, date], Lock] = {}

    def _day_lock(self, plan_id: str, day: date) -> Lock:
        with self._lock:
            return self._day_locks.setdefault((plan_id, day), Lock())

    def create(
        self,
        *,
        depot: Depot,
        clients: Sequence[Client],
        team_count: int,
        start_date: date,
        horizon_days: int,
        plan: Plan,
        warnings: Sequence[str] = (),
    ) -> PlanRecord:
        record = PlanRecord(
            plan_id=self._id_source(),
            depot=depot,
            clients=tuple(clients),
            team_count=team_count,
            start_date=start_date,
            horizon_days=horizon_days,
            plan=plan,
            versions={day: 1 for day in plan},
            warnings=list(warnings),
        )
        with self._lock:
            if record.plan_id in self._records:
                raise ValueError(f"Duplicate plan id '{record.plan_id}'.")
            self._records[record.plan_id] = record
        return record

    def get(self, plan_id: str) -> PlanRecord:
        with self._lock:
            record = self._records.get(plan_id)
        if record is None:
            raise PlanNotFound(plan_id)
        return record

    def list_ids(self) -> list[str]:
        with self._lock:
            return list(self._records)

    def delete(self, plan_id: str) -> bool:
        with self._lock:
            removed = self._records.pop(plan_id, None)
            for key in [key for key in self._day_locks if key[0] == plan_id]:
                del self._day_locks[key]
        return removed is not None

    def update_day(
        self,
        plan_id: str,
        day: date,
        update: Callable[[PlanRecord], Plan],
        *,
        expected_version: int | None = None,
        extra_days: Sequence[date] = (),
    ) -> PlanRecord:
        """Replace date entries produced by ``update`` under the date locks.

        ``update`` receives the current record and returns the new plan. Every
        date whose routes changed gets its version bumped. ``extra_days``
        names further dates the update may touch (e.g. the source date of a
        move); their locks are taken in date order with ``day``'s.
        """
        record = self.get(plan_id)
        days = sorted({day, *extra_days})
        locks = [self._day_lock(plan_id, each) for each in days]
        for lock in locks:
            lock.acquire()
        try:
            current = record.version_of(day)
            if expected_version is not None and expected_version != current:
                raise VersionConflict(plan_id, day.isoformat(), expected_version, current)
            new_plan = update(record)
            with self._lock:
                # merge only the locked dates; others may have moved on meanwhile
                merged = dict(record.plan)
                for each in days:
                    if new_plan.get(each) is record.plan.get(each):
                        continue
                    if each in new_plan:
                        merged[each] = new_plan[each]
                    else:
                        merged.pop(each, None)
                    record.versions[each] = record.version_of(each) + 1
                record.plan = merged
            return record
        finally:
            for lock in reversed(locks):
                lock.release()

    def routes_for(self, plan_id: str, day: date) -> tuple[int, tuple[Route, ...] | None]:
        record = self.get(plan_id)
        with self._lock:
            return record.version_of(day), record.plan.get(day)
