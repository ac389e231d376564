"""Provider directory schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ProviderService(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: str
    price: float
    duration: int


class ReviewAuthor(BaseModel):
    id: int
    name: Optional[str] = None
    image: Optional[str] = None


class ProviderReview(BaseModel):
    id: int
    rating: int
    comment: Optional[str] = None
    createdAt: Optional[datetime] = None
    client: Optional[ReviewAuthor] = None


class ProviderProfileResponse(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    role: str
    kycStatus: str
    rating: float
    reviewCount: int
    services: list[ProviderService]
    reviews: list[ProviderReview]


class ProviderCard(BaseModel):
    """Provider as shown in search results and saved lists"""

    id: int
    name: Optional[str] = None
    image: Optional[str] = None
    kycStatus: str
    rating: float
    reviewCount: int
    services: list[ProviderService]
    isFavorite: bool = False
    isFollowing: bool = False


class FavoriteResponse(BaseModel):
    message: str
    isFavorite: bool


class FollowResponse(BaseModel):
    message: str
    isFollowing: bool


class EarningsResponse(BaseModel):
    totalMinutesServiced: int
    currentMonthMinutes: int
    totalEarnings: float
    currentMonthEarnings: float
    availableBalance: float
    pendingPayout: float
    lastPayoutDate: Optional[datetime] = None
    lastPayoutAmount: Optional[float] = None
    minutesGrowthPercent: float
