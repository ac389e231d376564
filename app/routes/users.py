import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..shared.validators import clean_text, validate_http_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


class UserUpdate(BaseModel):
    name: Optional[str] = None
    image: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_text(v, max_length=255)

    @field_validator("image")
    @classmethod
    def validate_image(cls, v):
        if v:
            return validate_http_url(v)
        return v


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: str
    kycStatus: str
    createdAt: Optional[datetime] = None


def _to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        image=user.image,
        role=user.role,
        kycStatus=user.kyc_status,
        createdAt=user.created_at,
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's profile"""
    return _to_response(current_user)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the authenticated user's display name or avatar"""
    if data.name is not None:
        current_user.name = data.name
    if data.image is not None:
        current_user.image = data.image

    db.commit()
    db.refresh(current_user)
    logger.info(f"✅ Profile updated for user {current_user.id}")
    return _to_response(current_user)
