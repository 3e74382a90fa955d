"""Wall-clock time helpers for work schedules and appointments.

Times are naive local ``HH:MM`` strings. Internally they are handled as
minutes since midnight so that comparisons and interval checks are plain
integer arithmetic; anything that can cross midnight goes through
``datetime`` so the day rolls over explicitly.
"""

from datetime import date, datetime, timedelta

MINUTES_PER_DAY = 24 * 60


def parse_time(value: str) -> int:
    """
    Parse ``HH:MM`` (or ``HH:MM:SS``) into minutes since midnight.

    Raises:
        ValueError: If the value is not a valid wall-clock time
    """
    if not isinstance(value, str):
        raise ValueError("Time must be a string in HH:MM format")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValueError(f"Invalid time '{value}'. Expected HH:MM")

    hours, minutes = int(parts[0]), int(parts[1])
    if hours > 23 or minutes > 59 or (len(parts) == 3 and int(parts[2]) > 59):
        raise ValueError(f"Invalid time '{value}'. Expected HH:MM")

    return hours * 60 + minutes


def format_minutes(total: int) -> str:
    """Format minutes since midnight as ``HH:MM``."""
    if total < 0 or total >= MINUTES_PER_DAY:
        raise ValueError(f"{total} minutes is outside a single day")
    return f"{total // 60:02d}:{total % 60:02d}"


def normalize_time(value: str) -> str:
    """Return the canonical ``HH:MM`` form of a time string."""
    return format_minutes(parse_time(value))


def add_minutes(day: date, start: str, minutes: int) -> datetime:
    """Return the datetime ``minutes`` after ``start`` on ``day``, rolling the date if needed."""
    start_dt = datetime.combine(day, datetime.min.time()) + timedelta(minutes=parse_time(start))
    return start_dt + timedelta(minutes=minutes)


def compute_end_time(day: date, start: str, duration: int) -> tuple[str, bool]:
    """
    Compute the end of a booking.

    Returns:
        Tuple of (end time as HH:MM, crosses_midnight)
    """
    end_dt = add_minutes(day, start, duration)
    # Ending exactly at 00:00 of the next day still belongs to the next day
    crosses_midnight = end_dt.date() != day
    return end_dt.strftime("%H:%M"), crosses_midnight


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open interval overlap: touching intervals do not overlap."""
    return a_start < b_end and b_start < a_end


def day_of_week(day: date) -> int:
    """Weekday index used by work schedules: 0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7
