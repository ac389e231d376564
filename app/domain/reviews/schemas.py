"""Review domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text


class ReviewCreate(BaseModel):
    sessionId: int
    rating: int
    comment: Optional[str] = None

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v):
        if v < 1 or v > 5:
            raise ValueError("Rating must be between 1 and 5")
        return v

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        return clean_text(v)


class ReviewCreatedResponse(BaseModel):
    id: int
    createdAt: Optional[datetime] = None


class ReviewResponse(BaseModel):
    id: int
    sessionId: int
    clientId: int
    clientName: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    createdAt: Optional[datetime] = None


class ProviderReviewsResponse(BaseModel):
    providerId: int
    averageRating: Optional[float] = None
    count: int
    reviews: list[ReviewResponse]
