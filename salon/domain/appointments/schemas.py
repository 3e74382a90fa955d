"""Appointment schemas - Pydantic models for bookings and availability"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_time

AppointmentStatus = Literal["scheduled", "completed", "cancelled", "no-show"]


class AppointmentCreate(BaseModel):
    """Schema for a booking submission"""

    userId: int
    professionalId: int
    serviceId: int
    date: dt.date
    startTime: str
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("startTime")
    @classmethod
    def validate_start_time(cls, v):
        if not v or not v.strip():
            raise ValueError("Start time is required")
        return validate_time(v)

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, v):
        if v is None:
            return v
        return v.strip() or None


class AppointmentUpdate(BaseModel):
    """Schema for an admin edit; time related changes are re-validated against the agenda"""

    userId: Optional[int] = None
    professionalId: Optional[int] = None
    serviceId: Optional[int] = None
    date: Optional[dt.date] = None
    startTime: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("startTime")
    @classmethod
    def validate_start_time(cls, v):
        return validate_time(v)


class StatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    id: int
    userId: int
    professionalId: int
    serviceId: int
    date: dt.date
    startTime: str
    endTime: str
    status: str
    notes: Optional[str] = None
    createdAt: Optional[dt.datetime] = None


class PublicAppointmentResponse(BaseModel):
    """Agenda entry without client details, served on the public date listing"""

    id: int
    professionalId: int
    serviceId: int
    date: dt.date
    startTime: str
    endTime: str
    status: str


class AvailabilityResponse(BaseModel):
    professionalId: int
    serviceId: int
    date: dt.date
    slots: list[str]
