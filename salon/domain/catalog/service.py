"""Catalog service - Business logic for professionals and services"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Appointment, Professional, ProfessionalService, Service
from .repository import CatalogRepository
from .schemas import (
    ProfessionalCreate,
    ProfessionalServiceCreate,
    ProfessionalUpdate,
    ServiceCreate,
    ServiceUpdate,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for the professional and service catalog"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()

    # ------------------------------------------------------------------
    # Professionals
    # ------------------------------------------------------------------

    def get_professionals(self, active_only: bool = False) -> list[Professional]:
        return self.repo.get_professionals(self.db, active_only)

    def get_professional(self, professional_id: int) -> Professional:
        professional = self.repo.get_professional_by_id(self.db, professional_id)
        if not professional:
            raise HTTPException(status_code=404, detail="Professional not found")
        return professional

    def create_professional(self, data: ProfessionalCreate) -> Professional:
        """Create a new professional; CPF must be unique"""
        if self.repo.get_professional_by_cpf(self.db, data.cpf):
            raise HTTPException(status_code=409, detail="A professional with this CPF already exists")

        professional = self.repo.create_professional(
            self.db,
            name=data.name,
            phone=data.phone,
            email=data.email,
            cpf=data.cpf,
            address=data.address,
            profile_picture=data.profilePicture,
            active=data.active,
        )
        logger.info(f"✅ Professional created: {professional.id} ({professional.name})")
        return professional

    def update_professional(self, professional_id: int, data: ProfessionalUpdate) -> Professional:
        professional = self.get_professional(professional_id)

        if data.cpf and data.cpf != professional.cpf:
            existing = self.repo.get_professional_by_cpf(self.db, data.cpf)
            if existing and existing.id != professional.id:
                raise HTTPException(
                    status_code=409, detail="A professional with this CPF already exists"
                )

        updates = {}
        if data.name is not None:
            updates["name"] = data.name
        if data.phone is not None:
            updates["phone"] = data.phone
        if data.email is not None:
            updates["email"] = data.email
        if data.cpf is not None:
            updates["cpf"] = data.cpf
        if data.address is not None:
            updates["address"] = data.address
        if data.profilePicture is not None:
            updates["profile_picture"] = data.profilePicture
        if data.active is not None:
            updates["active"] = data.active

        return self.repo.update_professional(self.db, professional, **updates)

    def delete_professional(self, professional_id: int) -> None:
        """Delete a professional. Professionals with booking history must be deactivated instead."""
        professional = self.get_professional(professional_id)

        has_appointments = (
            self.db.query(Appointment.id)
            .filter(Appointment.professional_id == professional.id)
            .first()
            is not None
        )
        if has_appointments:
            raise HTTPException(
                status_code=409,
                detail="Professional has appointments. Deactivate instead of deleting.",
            )

        self.repo.delete_professional(self.db, professional)
        logger.info(f"🗑️ Professional deleted: {professional_id}")

    def get_professional_services(self, professional_id: int) -> list[Service]:
        self.get_professional(professional_id)
        return self.repo.get_professional_services(self.db, professional_id)

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def get_services(self, active_only: bool = False) -> list[Service]:
        return self.repo.get_services(self.db, active_only)

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service

    def create_service(self, data: ServiceCreate) -> Service:
        service = self.repo.create_service(
            self.db,
            name=data.name,
            description=data.description,
            duration=data.duration,
            price=data.price,
            active=data.active,
        )
        logger.info(f"✅ Service created: {service.id} ({service.name}, {service.duration} min)")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate) -> Service:
        service = self.get_service(service_id)
        updates = data.model_dump(exclude_none=True)
        return self.repo.update_service(self.db, service, **updates)

    def delete_service(self, service_id: int) -> None:
        service = self.get_service(service_id)

        has_appointments = (
            self.db.query(Appointment.id).filter(Appointment.service_id == service.id).first()
            is not None
        )
        if has_appointments:
            raise HTTPException(
                status_code=409,
                detail="Service has appointments. Deactivate instead of deleting.",
            )

        self.repo.delete_service(self.db, service)
        logger.info(f"🗑️ Service deleted: {service_id}")

    def get_service_professionals(self, service_id: int) -> list[Professional]:
        self.get_service(service_id)
        return self.repo.get_service_professionals(self.db, service_id)

    # ------------------------------------------------------------------
    # Professional-service links
    # ------------------------------------------------------------------

    def add_service_to_professional(self, data: ProfessionalServiceCreate) -> ProfessionalService:
        self.get_professional(data.professionalId)
        self.get_service(data.serviceId)

        if self.repo.get_link(self.db, data.professionalId, data.serviceId):
            raise HTTPException(status_code=409, detail="Relationship already exists")

        try:
            return self.repo.create_link(
                self.db, data.professionalId, data.serviceId, data.commission
            )
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Relationship already exists") from e

    def remove_service_from_professional(self, professional_id: int, service_id: int) -> None:
        link = self.repo.get_link(self.db, professional_id, service_id)
        if not link:
            raise HTTPException(status_code=404, detail="Relationship not found")
        self.repo.delete_link(self.db, link)
