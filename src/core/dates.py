"""Date helpers pinned to the project's display timezone (IST)."""
from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from django.utils import timezone


def today_local() -> date:
    return timezone.localdate()


def month_bounds(day: date) -> tuple[date, date]:
    """First and last day of the month containing *day*."""
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def parse_month(value: str | None) -> date:
    """Parse ``YYYY-MM`` into the first day of that month (current month if empty)."""
    if not value:
        return today_local().replace(day=1)
    try:
        parsed = datetime.strptime(value, "%Y-%m")
    except ValueError as exc:
        raise ValueError("Le mois doit etre au format AAAA-MM.") from exc
    return parsed.date()


def week_start(day: date) -> date:
    """Sunday-based start of the week containing *day*."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def format_ddmmyyyy(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = timezone.localtime(value) if timezone.is_aware(value) else value
    return value.strftime("%d-%m-%Y")


def format_readable(value) -> str:
    """``15 Jan 2024`` style."""
    if value is None:
        return ""
    if isinstance(value, datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime("%d %b %Y")


def time_ago(value: datetime | None, *, now: datetime | None = None) -> str:
    """Human "5m ago" / "3h ago" / "2d ago" label, falling back to the date after a week."""
    if value is None:
        return ""
    now = now or timezone.now()
    seconds = int((now - value).total_seconds())
    if seconds < 60:
        return "Just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return format_ddmmyyyy(value)


def months_between(start: date, end: date) -> int:
    """Whole calendar months elapsed from *start* to *end*."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


def calendar_months(start: date, end: date) -> int:
    """Month numbers elapsed from *start* to *end*, ignoring the day of month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def tenure_label(joining_date: date | None, *, today: date | None = None) -> str:
    """``"2y 3m"`` or ``"5m"`` since *joining_date*."""
    if joining_date is None:
        return ""
    months = months_between(joining_date, today or today_local())
    years, months = divmod(months, 12)
    if years:
        return f"{years}y {months}m"
    return f"{months}m"
