"""Catalog repository - Database operations for professionals and services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Professional, ProfessionalService, Service


class CatalogRepository:
    """Repository for professional and service database operations"""

    # Professional Methods
    @staticmethod
    def get_professionals(db: Session, active_only: bool = False) -> list[Professional]:
        """Get all professionals"""
        query = db.query(Professional)
        if active_only:
            query = query.filter(Professional.active.is_(True))
        return query.order_by(Professional.name.asc()).all()

    @staticmethod
    def get_professional_by_id(db: Session, professional_id: int) -> Optional[Professional]:
        """Get a specific professional by ID"""
        return db.query(Professional).filter(Professional.id == professional_id).first()

    @staticmethod
    def get_professional_by_cpf(db: Session, cpf: str) -> Optional[Professional]:
        return db.query(Professional).filter(Professional.cpf == cpf).first()

    @staticmethod
    def lock_professional(db: Session, professional_id: int) -> Optional[Professional]:
        """
        Load a professional row with a row-level lock held until commit.
        Serializes concurrent bookings for the same professional.
        """
        return (
            db.query(Professional)
            .filter(Professional.id == professional_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def create_professional(db: Session, **data) -> Professional:
        professional = Professional(**data)
        db.add(professional)
        db.commit()
        db.refresh(professional)
        return professional

    @staticmethod
    def update_professional(db: Session, professional: Professional, **updates) -> Professional:
        """Update a professional with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(professional, key):
                setattr(professional, key, value)

        db.commit()
        db.refresh(professional)
        return professional

    @staticmethod
    def delete_professional(db: Session, professional: Professional) -> None:
        db.delete(professional)
        db.commit()

    # Service Methods
    @staticmethod
    def get_services(db: Session, active_only: bool = False) -> list[Service]:
        """Get all services"""
        query = db.query(Service)
        if active_only:
            query = query.filter(Service.active.is_(True))
        return query.order_by(Service.name.asc()).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def create_service(db: Session, **data) -> Service:
        service = Service(**data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        db.delete(service)
        db.commit()

    # Professional-Service Link Methods
    @staticmethod
    def get_link(db: Session, professional_id: int, service_id: int) -> Optional[ProfessionalService]:
        return (
            db.query(ProfessionalService)
            .filter(
                ProfessionalService.professional_id == professional_id,
                ProfessionalService.service_id == service_id,
            )
            .first()
        )

    @staticmethod
    def get_professional_services(db: Session, professional_id: int) -> list[Service]:
        """Get the services a professional performs"""
        return (
            db.query(Service)
            .join(ProfessionalService, ProfessionalService.service_id == Service.id)
            .filter(ProfessionalService.professional_id == professional_id)
            .order_by(Service.name.asc())
            .all()
        )

    @staticmethod
    def get_service_professionals(db: Session, service_id: int) -> list[Professional]:
        """Get the professionals who perform a service"""
        return (
            db.query(Professional)
            .join(ProfessionalService, ProfessionalService.professional_id == Professional.id)
            .filter(ProfessionalService.service_id == service_id)
            .order_by(Professional.name.asc())
            .all()
        )

    @staticmethod
    def create_link(
        db: Session, professional_id: int, service_id: int, commission: float = 0
    ) -> ProfessionalService:
        link = ProfessionalService(
            professional_id=professional_id, service_id=service_id, commission=commission
        )
        db.add(link)
        db.commit()
        db.refresh(link)
        return link

    @staticmethod
    def delete_link(db: Session, link: ProfessionalService) -> None:
        db.delete(link)
        db.commit()
