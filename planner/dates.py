from datetime import UTC, datetime


def as_utc(value: datetime) -> datetime:
    """Treat naive values (as SQLite returns them) as UTC."""
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def format_time(value: datetime) -> str:
    """``7:00 PM``"""
    return f"{value.hour % 12 or 12}:{value:%M %p}"


def format_day_and_time(value: datetime) -> str:
    """``Monday, Jan 5 at 7:00 PM``"""
    return f"{value:%A, %b} {value.day} at {format_time(value)}"


def format_day_and_time_with_year(value: datetime) -> str:
    """``Monday, Jan 5, 2026 at 7:00 PM``"""
    return f"{value:%A, %b} {value.day}, {value.year} at {format_time(value)}"
