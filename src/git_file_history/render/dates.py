"""Human-friendly commit dates."""

from datetime import datetime, timezone
from typing import Optional


def format_relative_date(date: str, now: Optional[datetime] = None) -> str:
    """Describe an ISO-8601 date relative to ``now``.

    Unparseable dates are returned unchanged.
    """
    try:
        moment = datetime.fromisoformat(date.replace("Z", "+00:00"))
    except ValueError:
        return date
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)

    days = (now - moment).days
    if days <= 0:
        return "today"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        weeks = days // 7
        return f"{weeks} week{'s' if weeks > 1 else ''} ago"
    if days < 365:
        months = days // 30
        return f"{months} month{'s' if months > 1 else ''} ago"
    return moment.date().isoformat()
