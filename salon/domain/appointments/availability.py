"""
Availability calculator

Turns a professional's working window for a weekday, a service duration and
the appointments already on the agenda into the list of start times a client
may book. The slot arithmetic is a pure function (``compute_slots``); the
``AvailabilityCalculator`` only loads the rows it needs.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...config import SLOT_CONFLICT_MODE, SLOT_INTERVAL_MINUTES
from ...models import WorkSchedule
from ...shared.time_window import day_of_week, format_minutes, overlaps, parse_time
from ..catalog.repository import CatalogRepository
from ..schedules.repository import WorkScheduleRepository
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)

CONFLICT_MODES = ("overlap", "start_time")


def slot_conflicts(
    start: int,
    end: int,
    booked: Iterable[tuple[str, str]],
    conflict_mode: str = SLOT_CONFLICT_MODE,
) -> bool:
    """
    Check a candidate interval (minutes since midnight) against booked (start, end) pairs.

    In ``overlap`` mode any intersection counts; ``start_time`` mode only
    rejects a booking that starts at exactly the same minute.
    """
    if conflict_mode not in CONFLICT_MODES:
        raise ValueError(f"Unknown conflict mode '{conflict_mode}'")

    for booked_start, booked_end in booked:
        b_start = parse_time(booked_start)
        if conflict_mode == "start_time":
            if b_start == start:
                return True
        elif overlaps(start, end, b_start, parse_time(booked_end)):
            return True
    return False


def compute_slots(
    start_time: str,
    end_time: str,
    duration: int,
    booked: Iterable[tuple[str, str]] = (),
    lunch: Optional[tuple[str, str]] = None,
    interval: int = SLOT_INTERVAL_MINUTES,
    conflict_mode: str = SLOT_CONFLICT_MODE,
) -> list[str]:
    """
    Compute bookable start times inside one working window.

    Args:
        start_time: Window opening (HH:MM)
        end_time: Window closing (HH:MM); a slot must end at or before it
        duration: Service length in minutes
        booked: (start, end) pairs of appointments holding a slot
        lunch: Optional (start, end) break during which nothing can run
        interval: Step between candidate start times, in minutes
        conflict_mode: "overlap" or "start_time"

    Returns:
        Start times in chronological order
    """
    if interval <= 0:
        raise ValueError("Slot interval must be positive")
    if duration <= 0:
        return []

    booked = list(booked)
    window_start, window_end = parse_time(start_time), parse_time(end_time)
    lunch_window = (parse_time(lunch[0]), parse_time(lunch[1])) if lunch else None

    slots = []
    candidate = window_start
    while candidate + duration <= window_end:
        candidate_end = candidate + duration
        blocked_by_lunch = lunch_window is not None and overlaps(
            candidate, candidate_end, lunch_window[0], lunch_window[1]
        )
        if not blocked_by_lunch and not slot_conflicts(
            candidate, candidate_end, booked, conflict_mode
        ):
            slots.append(format_minutes(candidate))
        candidate += interval

    return slots


def lunch_of(schedule: WorkSchedule) -> Optional[tuple[str, str]]:
    if schedule.lunch_start_time and schedule.lunch_end_time:
        return schedule.lunch_start_time, schedule.lunch_end_time
    return None


class AvailabilityCalculator:
    """Loads agenda data and computes free slots for a professional, service and date"""

    def __init__(
        self,
        db: Session,
        interval: int = SLOT_INTERVAL_MINUTES,
        conflict_mode: str = SLOT_CONFLICT_MODE,
    ):
        self.db = db
        self.interval = interval
        self.conflict_mode = conflict_mode
        self.catalog = CatalogRepository()
        self.schedules = WorkScheduleRepository()
        self.appointments = AppointmentRepository()

    def schedules_for(self, professional_id: int, day: date) -> list[WorkSchedule]:
        """Every working window for the date's weekday (split shifts), earliest first"""
        rows = self.schedules.get_for_day(self.db, professional_id, day_of_week(day))
        return sorted(rows, key=lambda row: (parse_time(row.start_time), row.id))

    def get_available_slots(self, professional_id: int, service_id: int, day: date) -> list[str]:
        """Return bookable start times; missing or inactive data yields an empty list"""
        professional = self.catalog.get_professional_by_id(self.db, professional_id)
        if not professional or not professional.active:
            logger.debug(f"No availability: professional {professional_id} missing or inactive")
            return []

        service = self.catalog.get_service_by_id(self.db, service_id)
        if not service or not service.active:
            logger.debug(f"No availability: service {service_id} missing or inactive")
            return []

        schedules = self.schedules_for(professional_id, day)
        if not schedules:
            return []

        booked = [
            (a.start_time, a.end_time)
            for a in self.appointments.get_occupying(self.db, professional_id, day)
        ]
        found = set()
        for schedule in schedules:
            found.update(
                compute_slots(
                    schedule.start_time,
                    schedule.end_time,
                    service.duration,
                    booked=booked,
                    lunch=lunch_of(schedule),
                    interval=self.interval,
                    conflict_mode=self.conflict_mode,
                )
            )
        slots = sorted(found, key=parse_time)
        logger.debug(
            f"📅 {len(slots)} slots for professional {professional_id}, "
            f"service {service_id} on {day.isoformat()}"
        )
        return slots
