"""Work schedule router - FastAPI endpoints for professional working hours"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from .schemas import WorkScheduleCreate, WorkScheduleResponse, WorkScheduleUpdate
from .service import WorkScheduleService, schedule_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Work Schedules"])


def get_schedule_service(db: Session = Depends(get_db)) -> WorkScheduleService:
    """Dependency injection for WorkScheduleService"""
    return WorkScheduleService(db)


@router.get("/professionals/{professional_id}/schedules", response_model=list[WorkScheduleResponse])
async def get_professional_schedules(
    professional_id: int,
    service: WorkScheduleService = Depends(get_schedule_service),
):
    """Get the weekly working hours of a professional"""
    return [schedule_to_dict(s) for s in service.get_schedules(professional_id)]


@router.post("/work-schedules", response_model=WorkScheduleResponse, status_code=201)
async def add_work_schedule(
    data: WorkScheduleCreate,
    _admin: User = Depends(get_current_admin),
    service: WorkScheduleService = Depends(get_schedule_service),
):
    return schedule_to_dict(service.add_schedule(data))


@router.put("/work-schedules/{schedule_id}", response_model=WorkScheduleResponse)
async def update_work_schedule(
    schedule_id: int,
    data: WorkScheduleUpdate,
    _admin: User = Depends(get_current_admin),
    service: WorkScheduleService = Depends(get_schedule_service),
):
    return schedule_to_dict(service.update_schedule(schedule_id, data))


@router.delete("/work-schedules/{schedule_id}", status_code=204)
async def delete_work_schedule(
    schedule_id: int,
    _admin: User = Depends(get_current_admin),
    service: WorkScheduleService = Depends(get_schedule_service),
):
    service.delete_schedule(schedule_id)
    return Response(status_code=204)
