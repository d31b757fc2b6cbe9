"""Build the set of visits due on a single date."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import Client, Visit
from .recurrence import is_due

logger = logging.getLogger(__name__)


def parse_clock(value: Optional[str]) -> Optional[int]:
    """Parse an ``HH:MM`` string into minutes since midnight.

    Returns ``None`` for empty or malformed values so callers can fall back to
    a default.
    """
    if not value:
        return None
    parts = value.strip().split(":")
    if len(parts) != 2:
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return hours * 60 + minutes


def format_clock(minutes: float) -> str:
    total = max(0, round(minutes))
    return f"{total // 60:02d}:{total % 60:02d}"


def resolve_window(client: Client) -> tuple[int, int]:
    start = parse_clock(client.window_start)
    end = parse_clock(client.window_end)
    if start is None:
        start = parse_clock(settings.default_window_start)
    if end is None:
        end = parse_clock(settings.default_window_end)
    return start, end


def resolve_duration(client: Client) -> int:
    if client.duration_min is None or client.duration_min <= 0:
        return settings.default_service_minutes
    return client.duration_min


def visit_for_client(client: Client) -> Visit:
    """Snapshot a located client into a visit."""
    if client.location is None:
        raise ValueError(f"Client '{client.client_id}' has no location.")
    window_start, window_end = resolve_window(client)
    return Visit(
        client_id=client.client_id,
        name=client.name,
        address=client.address,
        location=client.location,
        duration_min=resolve_duration(client),
        window_start=window_start,
        window_end=window_end,
    )


def find_unlocated_clients(clients: Sequence[Client]) -> list[str]:
    return [client.client_id for client in clients if client.location is None]


def build_daily_visits(day: date, clients: Sequence[Client], week_anchor: date) -> list[Visit]:
    visits: list[Visit] = []
    for client in clients:
        if client.location is None:
            continue
        if is_due(day, client, week_anchor):
            visits.append(visit_for_client(client))
    logger.debug(f"{len(visits)} visits due on {day.isoformat()}")
    return visits
