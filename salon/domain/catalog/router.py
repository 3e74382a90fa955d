"""Catalog router - FastAPI endpoints for professionals, services and their links"""

import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import ProfessionalService, User
from .schemas import (
    ProfessionalCreate,
    ProfessionalResponse,
    ProfessionalServiceCreate,
    ProfessionalServiceDelete,
    ProfessionalServiceResponse,
    ProfessionalUpdate,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)
from .service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Catalog"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def link_to_dict(link: ProfessionalService) -> dict:
    return {
        "id": link.id,
        "professionalId": link.professional_id,
        "serviceId": link.service_id,
        "commission": link.commission,
    }


# ---------------------------------------------------------------------------
# Professionals
# ---------------------------------------------------------------------------


@router.get("/professionals", response_model=list[ProfessionalResponse])
async def get_professionals(
    active: bool = Query(False, description="Only return active professionals"),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_professionals(active_only=active)


@router.get("/professionals/{professional_id}", response_model=ProfessionalResponse)
async def get_professional(
    professional_id: int,
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_professional(professional_id)


@router.post("/professionals", response_model=ProfessionalResponse, status_code=201)
async def create_professional(
    data: ProfessionalCreate,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_professional(data)


@router.put("/professionals/{professional_id}", response_model=ProfessionalResponse)
async def update_professional(
    professional_id: int,
    data: ProfessionalUpdate,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_professional(professional_id, data)


@router.delete("/professionals/{professional_id}", status_code=204)
async def delete_professional(
    professional_id: int,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    service.delete_professional(professional_id)
    return Response(status_code=204)


@router.get("/professionals/{professional_id}/services", response_model=list[ServiceResponse])
async def get_professional_services(
    professional_id: int,
    service: CatalogService = Depends(get_catalog_service),
):
    """Services a professional performs"""
    return service.get_professional_services(professional_id)


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@router.get("/services", response_model=list[ServiceResponse])
async def get_services(
    active: bool = Query(False, description="Only return active services"),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_services(active_only=active)


@router.get("/services/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: int,
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_service(service_id)


@router.post("/services", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_service(data)


@router.put("/services/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_service(service_id, data)


@router.delete("/services/{service_id}", status_code=204)
async def delete_service(
    service_id: int,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    service.delete_service(service_id)
    return Response(status_code=204)


@router.get("/services/{service_id}/professionals", response_model=list[ProfessionalResponse])
async def get_service_professionals(
    service_id: int,
    service: CatalogService = Depends(get_catalog_service),
):
    """Professionals who perform a service"""
    return service.get_service_professionals(service_id)


# ---------------------------------------------------------------------------
# Professional-service links
# ---------------------------------------------------------------------------


@router.post("/professional-services", response_model=ProfessionalServiceResponse, status_code=201)
async def add_service_to_professional(
    data: ProfessionalServiceCreate,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    link = service.add_service_to_professional(data)
    logger.info(f"🔗 Service {data.serviceId} linked to professional {data.professionalId}")
    return link_to_dict(link)


@router.delete("/professional-services", status_code=204)
async def remove_service_from_professional(
    data: ProfessionalServiceDelete,
    _admin: User = Depends(get_current_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    service.remove_service_from_professional(data.professionalId, data.serviceId)
    return Response(status_code=204)
