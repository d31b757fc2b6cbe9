"""Error types raised by the planning core and the plan store."""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """A planning request violates a precondition (team count, horizon, depot)."""


class PlanNotFound(LookupError):
    """No stored plan exists for the requested identifier."""

    def __init__(self, plan_id: str) -> None:
        super().__init__(f"Plan '{plan_id}' not found.")
        self.plan_id = plan_id


class VersionConflict(RuntimeError):
    """A date entry changed since the caller last read it."""

    def __init__(self, plan_id: str, day: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Plan '{plan_id}' date {day} is at version {actual}, expected {expected}."
        )
        self.plan_id = plan_id
        self.day = day
        self.expected = expected
        self.actual = actual
