"""Human-readable renderings of response times and presence."""

from datetime import datetime

from app.utils.clock import utc_now


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''}"


def format_response_time(minutes: float | None) -> str:
    if minutes is None:
        return "No response"
    whole_minutes = round(minutes)
    if whole_minutes < 60:
        return f"{whole_minutes} min"
    hours = round(minutes / 60)
    if hours < 24:
        return _plural(hours, "hr")
    return _plural(round(minutes / 1440), "day")


def format_last_active(last_active: datetime | None, now: datetime | None = None) -> str:
    if last_active is None:
        return "Never"

    now = now or utc_now()
    elapsed_seconds = (now - last_active).total_seconds()
    minutes = int(elapsed_seconds // 60)
    hours = int(elapsed_seconds // 3600)
    days = int(elapsed_seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if hours < 24:
        return f"{_plural(hours, 'hr')} ago"
    if days < 7:
        return f"{_plural(days, 'day')} ago"
    return last_active.date().isoformat()
