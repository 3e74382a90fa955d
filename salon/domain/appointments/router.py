"""Appointment router - FastAPI endpoints for availability and bookings"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user, get_optional_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .availability import AvailabilityCalculator
from .booking import BookingService
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    AvailabilityResponse,
    PublicAppointmentResponse,
    StatusUpdate,
)
from .service import AppointmentService, appointment_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Appointments"])

# Public agenda reads are unauthenticated; keep scrapers in check
rate_limit_public = create_rate_limiter(limit=120, window_seconds=60, key_prefix="agenda")


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_availability_calculator(db: Session = Depends(get_db)) -> AvailabilityCalculator:
    return AvailabilityCalculator(db)


@router.get(
    "/availability",
    response_model=AvailabilityResponse,
    dependencies=[Depends(rate_limit_public)],
)
async def get_availability(
    professional_id: int = Query(..., alias="professionalId"),
    service_id: int = Query(..., alias="serviceId"),
    day: date = Query(..., alias="date"),
    calculator: AvailabilityCalculator = Depends(get_availability_calculator),
):
    """Bookable start times for a professional and service on a date"""
    slots = calculator.get_available_slots(professional_id, service_id, day)
    return {
        "professionalId": professional_id,
        "serviceId": service_id,
        "date": day,
        "slots": slots,
    }


@router.get("/appointments", dependencies=[Depends(rate_limit_public)])
async def get_appointments(
    day: Optional[date] = Query(None, alias="date"),
    professional_id: Optional[int] = Query(None, alias="professionalId"),
    current_user: Optional[User] = Depends(get_optional_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """
    With ``date`` the agenda for that day is public (client details are left out).
    Without it the session user's own appointments are returned.
    """
    if day is not None:
        appointments = service.get_by_date(day, professional_id)
        return [
            PublicAppointmentResponse(**appointment_to_dict(a)).model_dump(mode="json")
            for a in appointments
        ]

    if current_user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    appointments = service.get_user_appointments(current_user.id)
    return [AppointmentResponse(**appointment_to_dict(a)).model_dump(mode="json") for a in appointments]


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return appointment_to_dict(service.get_visible_appointment(appointment_id, current_user))


@router.get("/professionals/{professional_id}/appointments", response_model=list[AppointmentResponse])
async def get_professional_appointments(
    professional_id: int,
    day: Optional[date] = Query(None, alias="date"),
    _admin: User = Depends(get_current_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    return [
        appointment_to_dict(a) for a in service.get_professional_appointments(professional_id, day)
    ]


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    booking: BookingService = Depends(get_booking_service),
):
    """Submit a booking; the slot is re-checked server-side before it is stored"""
    return appointment_to_dict(booking.book(data, current_user))


@router.put("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    _admin: User = Depends(get_current_admin),
    service: AppointmentService = Depends(get_appointment_service),
    booking: BookingService = Depends(get_booking_service),
):
    appointment = service.get_appointment(appointment_id)
    return appointment_to_dict(booking.update_appointment(appointment, data))


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    data: StatusUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
    booking: BookingService = Depends(get_booking_service),
):
    appointment = service.get_appointment(appointment_id)
    return appointment_to_dict(booking.change_status(appointment, data.status, current_user))


@router.delete("/appointments/{appointment_id}", status_code=204)
async def delete_appointment(
    appointment_id: int,
    _admin: User = Depends(get_current_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    service.delete_appointment(appointment_id)
    return Response(status_code=204)
