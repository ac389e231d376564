"""Review router - FastAPI endpoints for reviews"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import ProviderReviewsResponse, ReviewCreate, ReviewCreatedResponse, ReviewResponse
from .service import ReviewService

router = APIRouter(tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


@router.post("/reviews", response_model=ReviewCreatedResponse, status_code=201)
async def create_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Rate a completed session (client only, once)"""
    review = service.create_review(data, current_user)
    return ReviewCreatedResponse(id=review.id, createdAt=review.created_at)


@router.get("/providers/{provider_id}/reviews", response_model=ProviderReviewsResponse)
async def get_provider_reviews(
    provider_id: int,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """All reviews of a provider with the average rating"""
    result = service.get_provider_reviews(provider_id)
    return ProviderReviewsResponse(
        providerId=result["providerId"],
        averageRating=result["averageRating"],
        count=result["count"],
        reviews=[
            ReviewResponse(
                id=r.id,
                sessionId=r.session_id,
                clientId=r.client_id,
                clientName=r.client.name if r.client else None,
                rating=r.rating,
                comment=r.comment,
                createdAt=r.created_at,
            )
            for r in result["reviews"]
        ],
    )
