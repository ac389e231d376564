"""Catalog domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text


class ServiceCreate(BaseModel):
    """Schema for creating a service"""

    title: str
    description: Optional[str] = None
    price: float
    duration: int
    category: str = "General"

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        v = clean_text(v, max_length=255)
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return clean_text(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v <= 0:
            raise ValueError("Price must be greater than 0")
        return v

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v <= 0:
            raise ValueError("Duration must be greater than 0")
        return v

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return clean_text(v, max_length=100) or "General"


class ServiceUpdate(BaseModel):
    """Schema for updating a service; omitted fields are left unchanged"""

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    duration: Optional[int] = None
    category: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator("title", "category")
    @classmethod
    def validate_short_text(cls, v):
        return clean_text(v, max_length=255)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than 0")
        return v

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Duration must be greater than 0")
        return v


class ProviderSummary(BaseModel):
    id: int
    name: Optional[str] = None
    image: Optional[str] = None


class ServiceResponse(BaseModel):
    """Schema for service response"""

    id: int
    providerId: int
    title: str
    description: Optional[str] = None
    category: str
    price: float
    duration: int
    isActive: bool
    createdAt: Optional[datetime] = None
    provider: Optional[ProviderSummary] = None


class CategoryResponse(BaseModel):
    name: str
    serviceCount: int


class CategoryListResponse(BaseModel):
    categories: list[CategoryResponse]
    count: int
