"""
Booking submission flow

Every write that puts an appointment on a professional's agenda goes
through ``BookingService``: the professional row is locked for the length of
the transaction, the slot is re-validated against the working window and the
appointments already holding time, and only then is the row written. The
partial unique index on appointments catches anything that slips past the
check (for example on SQLite, which ignores row locks).
"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import SLOT_CONFLICT_MODE
from ...models import OCCUPYING_STATUSES, Appointment, Professional, Service, User
from ...shared.time_window import compute_end_time, overlaps, parse_time
from ..catalog.repository import CatalogRepository
from .availability import AvailabilityCalculator, lunch_of, slot_conflicts
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)

SERVICE_NOT_FOUND = "Serviço não encontrado"
PROFESSIONAL_NOT_FOUND = "Profissional não encontrado"
SLOT_UNAVAILABLE = "Horário indisponível"
CROSSES_MIDNIGHT = "O serviço ultrapassa a meia-noite"

# Status changes an admin may apply; clients may only cancel
ALLOWED_TRANSITIONS = {
    "scheduled": {"completed", "cancelled", "no-show"},
    "cancelled": {"scheduled"},
    "no-show": {"scheduled", "completed"},
    "completed": {"scheduled"},
}


class BookingService:
    """Creates and reschedules appointments with server-side slot validation"""

    def __init__(self, db: Session, conflict_mode: str = SLOT_CONFLICT_MODE):
        self.db = db
        self.conflict_mode = conflict_mode
        self.catalog = CatalogRepository()
        self.repo = AppointmentRepository()
        self.calculator = AvailabilityCalculator(db, conflict_mode=conflict_mode)

    def _resolve_service(self, service_id: int) -> Service:
        service = self.catalog.get_service_by_id(self.db, service_id)
        if not service:
            raise HTTPException(status_code=404, detail=SERVICE_NOT_FOUND)
        if not service.active:
            raise HTTPException(status_code=400, detail="Serviço indisponível")
        return service

    def _lock_professional(self, professional_id: int) -> Professional:
        professional = self.catalog.lock_professional(self.db, professional_id)
        if not professional:
            raise HTTPException(status_code=404, detail=PROFESSIONAL_NOT_FOUND)
        if not professional.active:
            raise HTTPException(status_code=400, detail="Profissional indisponível")
        return professional

    def _ensure_user(self, user_id: int) -> None:
        if not self.db.query(User.id).filter(User.id == user_id).first():
            raise HTTPException(status_code=404, detail="User not found")

    def _end_time(self, day: date, start_time: str, duration: int) -> str:
        end_time, crosses_midnight = compute_end_time(day, start_time, duration)
        if crosses_midnight:
            raise HTTPException(status_code=422, detail=CROSSES_MIDNIGHT)
        return end_time

    def ensure_slot_available(
        self,
        professional_id: int,
        day: date,
        start_time: str,
        end_time: str,
        exclude_id: Optional[int] = None,
        on_grid: bool = False,
    ) -> None:
        """
        Raise 409 unless [start, end) fits inside one working window and is free.

        With ``on_grid`` the start must also be one of the calculator's
        candidate times for that window.
        """
        schedules = self.calculator.schedules_for(professional_id, day)
        if not schedules:
            logger.info(f"🚫 Professional {professional_id} does not work on {day.isoformat()}")
            raise HTTPException(status_code=409, detail=SLOT_UNAVAILABLE)

        start, end = parse_time(start_time), parse_time(end_time)
        schedule = next(
            (
                row
                for row in schedules
                if parse_time(row.start_time) <= start and end <= parse_time(row.end_time)
            ),
            None,
        )
        if schedule is None:
            raise HTTPException(status_code=409, detail=SLOT_UNAVAILABLE)

        if on_grid and (start - parse_time(schedule.start_time)) % self.calculator.interval:
            logger.info(f"🚫 {start_time} is not a bookable start for professional {professional_id}")
            raise HTTPException(status_code=409, detail=SLOT_UNAVAILABLE)

        lunch = lunch_of(schedule)
        if lunch and overlaps(start, end, parse_time(lunch[0]), parse_time(lunch[1])):
            raise HTTPException(status_code=409, detail=SLOT_UNAVAILABLE)

        booked = [
            (a.start_time, a.end_time)
            for a in self.repo.get_occupying(self.db, professional_id, day, exclude_id=exclude_id)
        ]
        if slot_conflicts(start, end, booked, self.conflict_mode):
            logger.info(
                f"🚫 Slot {start_time}-{end_time} taken for professional {professional_id} "
                f"on {day.isoformat()}"
            )
            raise HTTPException(status_code=409, detail=SLOT_UNAVAILABLE)

    def book(self, data: AppointmentCreate, current_user: User) -> Appointment:
        """Validate and persist a booking submission"""
        if not current_user.is_admin and data.userId != current_user.id:
            logger.warning(
                f"🚫 User {current_user.id} tried to book on behalf of user {data.userId}"
            )
            raise HTTPException(status_code=403, detail="Forbidden")

        try:
            if data.userId != current_user.id:
                self._ensure_user(data.userId)

            service = self._resolve_service(data.serviceId)
            self._lock_professional(data.professionalId)
            end_time = self._end_time(data.date, data.startTime, service.duration)
            # Clients may only take start times the calculator offers
            self.ensure_slot_available(
                data.professionalId,
                data.date,
                data.startTime,
                end_time,
                on_grid=not current_user.is_admin,
            )

            appointment = self.repo.create(
                self.db,
                user_id=data.userId,
                professional_id=data.professionalId,
                service_id=data.serviceId,
                date=data.date,
                start_time=data.startTime,
                end_time=end_time,
                status="scheduled",
                notes=data.notes,
            )
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent booking rejected by the database: {e.orig}")
            raise HTTPException(status_code=409, detail=SLOT_UNAVAILABLE) from e
        except HTTPException:
            # Release the professional lock before reporting the failure
            self.db.rollback()
            raise

        logger.info(
            f"✅ Appointment {appointment.id} booked: professional {appointment.professional_id} "
            f"{appointment.date.isoformat()} {appointment.start_time}-{appointment.end_time}"
        )
        return appointment

    def update_appointment(self, appointment: Appointment, data: AppointmentUpdate) -> Appointment:
        """Apply an admin edit; moving the appointment re-runs the slot check"""
        fields = data.model_fields_set
        updates = {}

        try:
            if "userId" in fields and data.userId is not None and data.userId != appointment.user_id:
                self._ensure_user(data.userId)
                updates["user_id"] = data.userId

            if "notes" in fields:
                updates["notes"] = data.notes

            professional_id = data.professionalId or appointment.professional_id
            service_id = data.serviceId or appointment.service_id
            day = data.date or appointment.date
            start_time = data.startTime or appointment.start_time

            moved = (
                professional_id != appointment.professional_id
                or service_id != appointment.service_id
                or day != appointment.date
                or start_time != appointment.start_time
            )
            if moved:
                service = self._resolve_service(service_id)
                self._lock_professional(professional_id)
                end_time = self._end_time(day, start_time, service.duration)
                if appointment.status in OCCUPYING_STATUSES:
                    self.ensure_slot_available(
                        professional_id, day, start_time, end_time, exclude_id=appointment.id
                    )
                updates.update(
                    professional_id=professional_id,
                    service_id=service_id,
                    date=day,
                    start_time=start_time,
                    end_time=end_time,
                )

            appointment = self.repo.update(self.db, appointment, **updates)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail=SLOT_UNAVAILABLE) from e
        except HTTPException:
            self.db.rollback()
            raise

        logger.info(f"✏️ Appointment {appointment.id} updated")
        return appointment

    def change_status(self, appointment: Appointment, status: str, current_user: User) -> Appointment:
        """Move an appointment through its lifecycle"""
        if not current_user.is_admin:
            if appointment.user_id != current_user.id:
                raise HTTPException(status_code=403, detail="Forbidden")
            if status != "cancelled":
                raise HTTPException(
                    status_code=403, detail="Clients can only cancel their appointments"
                )

        if status == appointment.status:
            return appointment

        if status not in ALLOWED_TRANSITIONS.get(appointment.status, set()):
            raise HTTPException(
                status_code=400,
                detail=f"Cannot change status from {appointment.status} to {status}",
            )

        previous = appointment.status
        try:
            # Reopening a cancelled appointment takes its slot back
            if previous not in OCCUPYING_STATUSES and status in OCCUPYING_STATUSES:
                self._lock_professional(appointment.professional_id)
                self.ensure_slot_available(
                    appointment.professional_id,
                    appointment.date,
                    appointment.start_time,
                    appointment.end_time,
                    exclude_id=appointment.id,
                )
            appointment = self.repo.update(self.db, appointment, status=status)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail=SLOT_UNAVAILABLE) from e
        except HTTPException:
            self.db.rollback()
            raise

        logger.info(f"🔄 Appointment {appointment.id} status: {previous} -> {status}")
        return appointment
