"""Provider directory router - profiles, search, favorites, following, earnings"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_provider
from ...clock import Clock, get_clock
from ...database import get_db
from ...models import User
from .schemas import (
    EarningsResponse,
    FavoriteResponse,
    FollowResponse,
    ProviderCard,
    ProviderProfileResponse,
    ProviderReview,
    ProviderService,
    ReviewAuthor,
)
from .service import ProviderDirectoryService

router = APIRouter(prefix="/providers", tags=["Providers"])
saved_router = APIRouter(tags=["Providers"])
earnings_router = APIRouter(prefix="/provider", tags=["Providers"])


def get_directory_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ProviderDirectoryService:
    """Dependency injection for ProviderDirectoryService"""
    return ProviderDirectoryService(db, clock)


def _service(s) -> ProviderService:
    return ProviderService(
        id=s.id,
        title=s.title,
        description=s.description,
        category=s.category,
        price=s.price,
        duration=s.duration,
    )


def _card(card: dict) -> ProviderCard:
    provider = card["provider"]
    return ProviderCard(
        id=provider.id,
        name=provider.name,
        image=provider.image,
        kycStatus=provider.kyc_status,
        rating=card["rating"],
        reviewCount=card["reviewCount"],
        services=[_service(s) for s in card["services"]],
        isFavorite=card["isFavorite"],
        isFollowing=card["isFollowing"],
    )


@router.get("/search", response_model=list[ProviderCard])
async def search_providers(
    q: Optional[str] = Query(None, max_length=100),
    category: Optional[str] = Query(None, max_length=100),
    minPrice: Optional[float] = Query(None, ge=0),
    maxPrice: Optional[float] = Query(None, ge=0),
    current_user: User = Depends(get_current_user),
    service: ProviderDirectoryService = Depends(get_directory_service),
):
    """Verified providers matching a name or service title, filtered by their services"""
    return [_card(c) for c in service.search(current_user, q, category, minPrice, maxPrice)]


@router.get("/{provider_id}", response_model=ProviderProfileResponse)
async def get_provider_profile(
    provider_id: int,
    current_user: User = Depends(get_current_user),
    service: ProviderDirectoryService = Depends(get_directory_service),
):
    """Public profile of a provider"""
    profile = service.get_profile(provider_id)
    provider = profile["provider"]
    return ProviderProfileResponse(
        id=provider.id,
        name=provider.name,
        email=provider.email,
        image=provider.image,
        role=provider.role,
        kycStatus=provider.kyc_status,
        rating=profile["rating"],
        reviewCount=profile["reviewCount"],
        services=[_service(s) for s in profile["services"]],
        reviews=[
            ProviderReview(
                id=r.id,
                rating=r.rating,
                comment=r.comment,
                createdAt=r.created_at,
                client=ReviewAuthor(id=r.client.id, name=r.client.name, image=r.client.image)
                if r.client
                else None,
            )
            for r in profile["reviews"]
        ],
    )


@router.post("/{provider_id}/favorite", response_model=FavoriteResponse)
async def favorite_provider(
    provider_id: int,
    current_user: User = Depends(get_current_user),
    service: ProviderDirectoryService = Depends(get_directory_service),
):
    return FavoriteResponse(message=service.add_favorite(provider_id, current_user), isFavorite=True)


@router.delete("/{provider_id}/favorite", response_model=FavoriteResponse)
async def unfavorite_provider(
    provider_id: int,
    current_user: User = Depends(get_current_user),
    service: ProviderDirectoryService = Depends(get_directory_service),
):
    return FavoriteResponse(message=service.remove_favorite(provider_id, current_user), isFavorite=False)


@router.post("/{provider_id}/follow", response_model=FollowResponse)
async def toggle_follow(
    provider_id: int,
    current_user: User = Depends(get_current_user),
    service: ProviderDirectoryService = Depends(get_directory_service),
):
    """Follow a provider, or unfollow when already following"""
    following = service.toggle_follow(provider_id, current_user)
    return FollowResponse(message="Followed" if following else "Unfollowed", isFollowing=following)


@saved_router.get("/favorites", response_model=list[ProviderCard])
async def get_favorites(
    current_user: User = Depends(get_current_user),
    service: ProviderDirectoryService = Depends(get_directory_service),
):
    return [_card(c) for c in service.get_favorites(current_user)]


@saved_router.get("/following", response_model=list[ProviderCard])
async def get_following(
    current_user: User = Depends(get_current_user),
    service: ProviderDirectoryService = Depends(get_directory_service),
):
    return [_card(c) for c in service.get_following(current_user)]


@earnings_router.get("/earnings", response_model=EarningsResponse)
async def get_earnings(
    current_user: User = Depends(require_provider),
    service: ProviderDirectoryService = Depends(get_directory_service),
):
    """Earnings summary of the current provider"""
    return EarningsResponse(**service.get_earnings(current_user))
