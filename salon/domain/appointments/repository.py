"""Appointment repository - Database operations for appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import OCCUPYING_STATUSES, Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_id(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_by_date(
        db: Session, day: date, professional_id: Optional[int] = None
    ) -> list[Appointment]:
        """Get every appointment on a date, optionally for one professional"""
        query = db.query(Appointment).filter(Appointment.date == day)
        if professional_id is not None:
            query = query.filter(Appointment.professional_id == professional_id)
        return query.order_by(Appointment.start_time.asc(), Appointment.id.asc()).all()

    @staticmethod
    def get_for_user(db: Session, user_id: int) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.user_id == user_id)
            .order_by(Appointment.date.desc(), Appointment.start_time.desc())
            .all()
        )

    @staticmethod
    def get_for_professional(
        db: Session, professional_id: int, day: Optional[date] = None
    ) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.professional_id == professional_id)
        if day is not None:
            query = query.filter(Appointment.date == day)
        return query.order_by(Appointment.date.asc(), Appointment.start_time.asc()).all()

    @staticmethod
    def get_occupying(
        db: Session, professional_id: int, day: date, exclude_id: Optional[int] = None
    ) -> list[Appointment]:
        """Appointments that still hold their slot (everything except cancelled)"""
        query = db.query(Appointment).filter(
            Appointment.professional_id == professional_id,
            Appointment.date == day,
            Appointment.status.in_(OCCUPYING_STATUSES),
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.order_by(Appointment.start_time.asc()).all()

    @staticmethod
    def create(db: Session, **data) -> Appointment:
        appointment = Appointment(**data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update(db: Session, appointment: Appointment, **updates) -> Appointment:
        # notes may be cleared explicitly, so None is applied as given
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)

        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
