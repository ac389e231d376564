"""Message domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import clean_text


class MessageCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        v = clean_text(v)
        if not v:
            raise ValueError("Content is required")
        return v


class MessageResponse(BaseModel):
    id: int
    senderId: int
    content: str
    isRead: bool
    createdAt: Optional[datetime] = None


class MessageCreatedResponse(BaseModel):
    id: int
    isRead: bool
    createdAt: Optional[datetime] = None


class MarkReadResponse(BaseModel):
    updated: int
