from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Tuple

PERIODS = ("daily", "weekly", "monthly")


def default_period_bounds(period: str, today: date) -> Tuple[date, date]:
    """Default ``(from, to)`` window the dynamics endpoint accepts for ``period``.

    monthly: first day of the month a year back through the end of last month.
    weekly: the Monday about a year back through the last Sunday.
    daily: 60 days back through yesterday.
    """
    if period == "monthly":
        start = date(today.year - 1, today.month, 1)
        end = today.replace(day=1) - timedelta(days=1)
        return start, end
    if period == "weekly":
        try:
            year_ago = today.replace(year=today.year - 1)
        except ValueError:
            # Feb 29
            year_ago = today.replace(year=today.year - 1, day=28)
        start = year_ago - timedelta(days=year_ago.weekday())
        # isoweekday: Monday=1 .. Sunday=7; today itself counts when it is Sunday.
        end = today - timedelta(days=today.isoweekday() % 7)
        return start, end
    if period == "daily":
        return today - timedelta(days=60), today - timedelta(days=1)
    raise ValueError(f"Unsupported period: {period}")


def resolve_period_bounds(
    period: str,
    from_date: Optional[str],
    to_date: Optional[str],
    today: date,
) -> Tuple[str, str]:
    default_from, default_to = default_period_bounds(period, today)
    return (
        from_date or default_from.isoformat(),
        to_date or default_to.isoformat(),
    )


def trend_percent(first: int, last: int) -> Optional[float]:
    if not first:
        return None
    return round((last - first) / first * 100, 1)
