"""Recurrence rules deciding whether a client is due on a calendar date."""

from __future__ import annotations

from datetime import date, timedelta

from ...models.domain import Client, Frequency


def weekday_index(day: date) -> int:
    """Weekday with 0=Sunday..6=Saturday."""
    return day.isoweekday() % 7


def start_of_week(day: date) -> date:
    """Sunday starting the calendar week that contains ``day``."""
    return day - timedelta(days=weekday_index(day))


def first_weekday_of_month(year: int, month: int, weekday: int) -> date:
    first = date(year, month, 1)
    offset = (weekday - weekday_index(first)) % 7
    return first + timedelta(days=offset)


def is_due(day: date, client: Client, week_anchor: date) -> bool:
    """Return True when ``client`` must be visited on ``day``.

    ``week_anchor`` is the Sunday of the week holding the planning start date
    and fixes the parity of biweekly rules over the whole horizon.
    """

    rule = client.recurrence
    weekday = weekday_index(day)
    if rule.preferred_days and weekday not in rule.preferred_days:
        return False

    match rule.frequency:
        case Frequency.WEEKLY:
            return True
        case Frequency.BIWEEKLY:
            weeks = (start_of_week(day) - week_anchor).days // 7
            return weeks % 2 == 0
        case Frequency.MONTHLY:
            # only the first preferred weekday anchors a monthly visit
            target = rule.preferred_days[0] if rule.preferred_days else weekday
            return first_weekday_of_month(day.year, day.month, target) == day
        case _:
            return False
