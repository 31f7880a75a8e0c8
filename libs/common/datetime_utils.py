"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from libs.common.datetime_utils import utc_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

Routers take ``get_now``/``get_today`` as dependencies so tests can pin the
clock through ``app.dependency_overrides``.
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    Always use this for timestamps in the database.
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def get_now() -> datetime:
    """FastAPI dependency for the current instant."""
    return utc_now()


def get_today() -> date:
    """FastAPI dependency for the current UTC date."""
    return utc_today()


def years_before(day: date, years: int) -> date:
    """Return the same calendar day ``years`` earlier.

    Feb 29 maps to Feb 28 when the target year is not a leap year.
    """
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


def start_of_month(day: date) -> date:
    return day.replace(day=1)
