"""Catalog repository - Database operations for services"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Service


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def get_services_for_provider(db: Session, provider_id: int) -> list[Service]:
        """Get all services of a provider, newest first"""
        return (
            db.query(Service)
            .filter(Service.provider_id == provider_id)
            .order_by(Service.created_at.desc(), Service.id.desc())
            .all()
        )

    @staticmethod
    def get_service_by_id(db: Session, service_id: int) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def create_service(db: Session, provider_id: int, **service_data) -> Service:
        """Create a new service"""
        service = Service(provider_id=provider_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        """Update a service with provided fields"""
        for key, value in updates.items():
            setattr(service, key, value)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def get_active_categories(db: Session) -> list[tuple[str, int]]:
        """Categories in use by active services with their service counts"""
        return (
            db.query(Service.category, func.count(Service.id))
            .filter(Service.is_active.is_(True))
            .group_by(Service.category)
            .order_by(Service.category.asc())
            .all()
        )
