from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today_in(tz: ZoneInfo, now: datetime | None = None) -> date:
    moment = now or utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def candidate_window(today: date, days: int) -> tuple[date, date]:
    """Inclusive [today, today + days - 1] range."""
    return today, today + timedelta(days=max(1, days) - 1)


def format_display_date(value: date | str | None) -> str:
    """DD.MM.YYYY, the date form used in replies."""
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime("%d.%m.%Y")
