"""Catalog router - FastAPI endpoints for provider services"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_provider
from ...database import get_db
from ...models import Service, User
from .schemas import (
    CategoryListResponse,
    CategoryResponse,
    ProviderSummary,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)
from .service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["Services"])
categories_router = APIRouter(tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def _to_response(s: Service, include_provider: bool = False) -> ServiceResponse:
    provider = None
    if include_provider and s.provider:
        provider = ProviderSummary(id=s.provider.id, name=s.provider.name, image=s.provider.image)
    return ServiceResponse(
        id=s.id,
        providerId=s.provider_id,
        title=s.title,
        description=s.description,
        category=s.category,
        price=s.price,
        duration=s.duration,
        isActive=s.is_active,
        createdAt=s.created_at,
        provider=provider,
    )


@router.get("", response_model=list[ServiceResponse])
async def get_services(
    current_user: User = Depends(require_provider),
    service: CatalogService = Depends(get_catalog_service),
):
    """Get the current provider's services"""
    return [_to_response(s) for s in service.get_services(current_user)]


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(require_provider),
    service: CatalogService = Depends(get_catalog_service),
):
    """Create a new service"""
    return _to_response(service.create_service(data, current_user))


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: int,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Get service details with its provider"""
    return _to_response(service.get_service(service_id), include_provider=True)


@router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    current_user: User = Depends(require_provider),
    service: CatalogService = Depends(get_catalog_service),
):
    """Update a service (owner only)"""
    return _to_response(service.update_service(service_id, data, current_user))


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    current_user: User = Depends(require_provider),
    service: CatalogService = Depends(get_catalog_service),
):
    """Deactivate a service (owner only)"""
    service.deactivate_service(service_id, current_user)
    return {"message": "Service deactivated successfully"}


@categories_router.get("/categories", response_model=CategoryListResponse)
async def get_categories(
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Categories offered by active services, alphabetical"""
    categories = [
        CategoryResponse(name=name, serviceCount=count) for name, count in service.get_categories()
    ]
    return CategoryListResponse(categories=categories, count=len(categories))
