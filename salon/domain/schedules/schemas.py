"""Work schedule schemas - Pydantic models for professional working hours"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.time_window import parse_time
from ...shared.validators import validate_time


def check_window(start_time, end_time, lunch_start_time, lunch_end_time):
    """Validate a working window and its optional lunch break"""
    if parse_time(start_time) >= parse_time(end_time):
        raise ValueError("Start time must be before end time")

    if (lunch_start_time is None) != (lunch_end_time is None):
        raise ValueError("Lunch break needs both a start and an end time")

    if lunch_start_time is not None:
        lunch_start, lunch_end = parse_time(lunch_start_time), parse_time(lunch_end_time)
        if lunch_start >= lunch_end:
            raise ValueError("Lunch start must be before lunch end")
        if lunch_start < parse_time(start_time) or lunch_end > parse_time(end_time):
            raise ValueError("Lunch break must be inside working hours")


class WorkScheduleCreate(BaseModel):
    """Schema for adding a working window to a professional"""

    professionalId: int
    dayOfWeek: int = Field(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    startTime: str
    endTime: str
    lunchStartTime: Optional[str] = None
    lunchEndTime: Optional[str] = None

    @field_validator("startTime", "endTime", "lunchStartTime", "lunchEndTime")
    @classmethod
    def validate_times(cls, v):
        return validate_time(v)

    @model_validator(mode="after")
    def validate_window(self):
        check_window(self.startTime, self.endTime, self.lunchStartTime, self.lunchEndTime)
        return self


class WorkScheduleUpdate(BaseModel):
    """Schema for updating a working window; the merged row is validated by the service"""

    dayOfWeek: Optional[int] = Field(None, ge=0, le=6)
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    lunchStartTime: Optional[str] = None
    lunchEndTime: Optional[str] = None

    @field_validator("startTime", "endTime", "lunchStartTime", "lunchEndTime")
    @classmethod
    def validate_times(cls, v):
        return validate_time(v)


class WorkScheduleResponse(BaseModel):
    id: int
    professionalId: int
    dayOfWeek: int
    startTime: str
    endTime: str
    lunchStartTime: Optional[str] = None
    lunchEndTime: Optional[str] = None
