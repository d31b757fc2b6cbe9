"""Route group exports."""

from . import health, plans, reschedule

__all__ = ["health", "plans", "reschedule"]
