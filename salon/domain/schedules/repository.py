"""Work schedule repository - Database operations for professional working hours"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import WorkSchedule


class WorkScheduleRepository:
    """Repository for work schedule database operations"""

    @staticmethod
    def get_for_professional(db: Session, professional_id: int) -> list[WorkSchedule]:
        """Get all schedule rows for a professional, ordered by weekday"""
        return (
            db.query(WorkSchedule)
            .filter(WorkSchedule.professional_id == professional_id)
            .order_by(WorkSchedule.day_of_week.asc(), WorkSchedule.start_time.asc())
            .all()
        )

    @staticmethod
    def get_for_day(db: Session, professional_id: int, day_of_week: int) -> list[WorkSchedule]:
        """Get the rows matching one weekday, lowest id first"""
        return (
            db.query(WorkSchedule)
            .filter(
                WorkSchedule.professional_id == professional_id,
                WorkSchedule.day_of_week == day_of_week,
            )
            .order_by(WorkSchedule.id.asc())
            .all()
        )

    @staticmethod
    def get_by_id(db: Session, schedule_id: int) -> Optional[WorkSchedule]:
        return db.query(WorkSchedule).filter(WorkSchedule.id == schedule_id).first()

    @staticmethod
    def create(db: Session, **data) -> WorkSchedule:
        schedule = WorkSchedule(**data)
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def update(db: Session, schedule: WorkSchedule, **updates) -> WorkSchedule:
        # Lunch fields may be cleared explicitly, so None is applied here
        for key, value in updates.items():
            if hasattr(schedule, key):
                setattr(schedule, key, value)

        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def delete(db: Session, schedule: WorkSchedule) -> None:
        db.delete(schedule)
        db.commit()
