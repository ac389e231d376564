"""Catalog service - Business logic for provider services"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Service, User
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for catalog business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(self, user: User) -> list[Service]:
        return self.repo.get_services_for_provider(self.db, user.id)

    def get_categories(self) -> list[tuple[str, int]]:
        return self.repo.get_active_categories(self.db)

    def get_service(self, service_id: int) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service

    def get_owned_service(self, service_id: int, user: User) -> Service:
        """Get a service and verify the caller provides it"""
        service = self.get_service(service_id)
        if service.provider_id != user.id:
            logger.warning(f"⚠️ User {user.id} tried to modify service {service_id}")
            raise HTTPException(status_code=403, detail="Forbidden: Not your service")
        return service

    def create_service(self, data: ServiceCreate, user: User) -> Service:
        logger.info(f"📥 Creating service for provider {user.id}")
        service = self.repo.create_service(
            self.db,
            user.id,
            title=data.title,
            description=data.description,
            price=data.price,
            duration=data.duration,
            category=data.category,
        )
        logger.info(f"✅ Service {service.id} created")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate, user: User) -> Service:
        """
        Update a service

        Bookings and sessions keep the price they were created with, so a price
        change only affects future bookings.
        """
        service = self.get_owned_service(service_id, user)

        updates = {}
        if data.title is not None:
            updates["title"] = data.title
        if data.description is not None:
            updates["description"] = data.description
        if data.price is not None:
            updates["price"] = data.price
        if data.duration is not None:
            updates["duration"] = data.duration
        if data.category is not None:
            updates["category"] = data.category
        if data.isActive is not None:
            updates["is_active"] = data.isActive

        return self.repo.update_service(self.db, service, **updates)

    def deactivate_service(self, service_id: int, user: User) -> Service:
        """Soft-delete: bookings and sessions keep referencing the row"""
        service = self.get_owned_service(service_id, user)
        service = self.repo.update_service(self.db, service, is_active=False)
        logger.info(f"🗑️ Service {service_id} deactivated by provider {user.id}")
        return service
