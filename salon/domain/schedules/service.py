"""Work schedule service - Business logic for professional working hours"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Professional, WorkSchedule
from ...shared.time_window import overlaps, parse_time
from .repository import WorkScheduleRepository
from .schemas import WorkScheduleCreate, WorkScheduleUpdate, check_window

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# API field name -> model column
FIELD_MAP = {
    "dayOfWeek": "day_of_week",
    "startTime": "start_time",
    "endTime": "end_time",
    "lunchStartTime": "lunch_start_time",
    "lunchEndTime": "lunch_end_time",
}


def schedule_to_dict(schedule: WorkSchedule) -> dict:
    return {
        "id": schedule.id,
        "professionalId": schedule.professional_id,
        "dayOfWeek": schedule.day_of_week,
        "startTime": schedule.start_time,
        "endTime": schedule.end_time,
        "lunchStartTime": schedule.lunch_start_time,
        "lunchEndTime": schedule.lunch_end_time,
    }


class WorkScheduleService:
    """Service layer for work schedules"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WorkScheduleRepository()

    def _ensure_professional(self, professional_id: int) -> Professional:
        professional = self.db.query(Professional).filter(Professional.id == professional_id).first()
        if not professional:
            raise HTTPException(status_code=404, detail="Professional not found")
        return professional

    def _ensure_no_overlap(
        self,
        professional_id: int,
        day_of_week: int,
        start_time: str,
        end_time: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        """Reject a window that overlaps another row of the same professional and weekday"""
        start, end = parse_time(start_time), parse_time(end_time)
        for other in self.repo.get_for_day(self.db, professional_id, day_of_week):
            if other.id == exclude_id:
                continue
            if overlaps(start, end, parse_time(other.start_time), parse_time(other.end_time)):
                raise HTTPException(
                    status_code=409,
                    detail=(
                        f"Schedule overlaps existing {DAY_NAMES[day_of_week]} window "
                        f"{other.start_time}-{other.end_time}"
                    ),
                )

    def get_schedules(self, professional_id: int) -> list[WorkSchedule]:
        self._ensure_professional(professional_id)
        return self.repo.get_for_professional(self.db, professional_id)

    def get_schedule(self, schedule_id: int) -> WorkSchedule:
        schedule = self.repo.get_by_id(self.db, schedule_id)
        if not schedule:
            raise HTTPException(status_code=404, detail="Work schedule not found")
        return schedule

    def add_schedule(self, data: WorkScheduleCreate) -> WorkSchedule:
        self._ensure_professional(data.professionalId)
        self._ensure_no_overlap(data.professionalId, data.dayOfWeek, data.startTime, data.endTime)

        schedule = self.repo.create(
            self.db,
            professional_id=data.professionalId,
            day_of_week=data.dayOfWeek,
            start_time=data.startTime,
            end_time=data.endTime,
            lunch_start_time=data.lunchStartTime,
            lunch_end_time=data.lunchEndTime,
        )
        logger.info(
            f"✅ Work schedule {schedule.id} added for professional {data.professionalId} "
            f"({DAY_NAMES[data.dayOfWeek]} {data.startTime}-{data.endTime})"
        )
        return schedule

    def update_schedule(self, schedule_id: int, data: WorkScheduleUpdate) -> WorkSchedule:
        schedule = self.get_schedule(schedule_id)

        merged = {column: getattr(schedule, column) for column in FIELD_MAP.values()}
        for field in data.model_fields_set:
            value = getattr(data, field)
            if value is None and field in ("dayOfWeek", "startTime", "endTime"):
                continue
            merged[FIELD_MAP[field]] = value

        try:
            check_window(
                merged["start_time"],
                merged["end_time"],
                merged["lunch_start_time"],
                merged["lunch_end_time"],
            )
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

        self._ensure_no_overlap(
            schedule.professional_id,
            merged["day_of_week"],
            merged["start_time"],
            merged["end_time"],
            exclude_id=schedule.id,
        )
        return self.repo.update(self.db, schedule, **merged)

    def delete_schedule(self, schedule_id: int) -> None:
        schedule = self.get_schedule(schedule_id)
        self.repo.delete(self.db, schedule)
        logger.info(f"🗑️ Work schedule deleted: {schedule_id}")
