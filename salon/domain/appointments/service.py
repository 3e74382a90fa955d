"""Appointment service - Read and delete operations for the agenda"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, Professional, User
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


def appointment_to_dict(appointment: Appointment) -> dict:
    return {
        "id": appointment.id,
        "userId": appointment.user_id,
        "professionalId": appointment.professional_id,
        "serviceId": appointment.service_id,
        "date": appointment.date,
        "startTime": appointment.start_time,
        "endTime": appointment.end_time,
        "status": appointment.status,
        "notes": appointment.notes,
        "createdAt": appointment.created_at,
    }


class AppointmentService:
    """Service layer for appointment lookups"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def get_visible_appointment(self, appointment_id: int, current_user: User) -> Appointment:
        """Clients only see their own appointments"""
        appointment = self.get_appointment(appointment_id)
        if not current_user.is_admin and appointment.user_id != current_user.id:
            logger.warning(
                f"🚫 Access denied: User {current_user.id} tried to access appointment {appointment_id}"
            )
            raise HTTPException(status_code=403, detail="Forbidden")
        return appointment

    def get_by_date(self, day: date, professional_id: Optional[int] = None) -> list[Appointment]:
        return self.repo.get_by_date(self.db, day, professional_id)

    def get_user_appointments(self, user_id: int) -> list[Appointment]:
        return self.repo.get_for_user(self.db, user_id)

    def get_professional_appointments(
        self, professional_id: int, day: Optional[date] = None
    ) -> list[Appointment]:
        exists = self.db.query(Professional.id).filter(Professional.id == professional_id).first()
        if not exists:
            raise HTTPException(status_code=404, detail="Professional not found")
        return self.repo.get_for_professional(self.db, professional_id, day)

    def delete_appointment(self, appointment_id: int) -> None:
        appointment = self.get_appointment(appointment_id)
        if appointment.transactions:
            raise HTTPException(
                status_code=409,
                detail="Appointment has transactions. Cancel it instead of deleting.",
            )
        self.repo.delete(self.db, appointment)
        logger.info(f"🗑️ Appointment deleted: {appointment_id}")
