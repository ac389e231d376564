import logging
from datetime import datetime
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import Device, Notification, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    body: str
    data: Optional[dict[str, Any]] = None
    isRead: bool
    createdAt: Optional[datetime] = None


class DeviceRegisterRequest(BaseModel):
    token: str
    platform: Optional[Literal["android", "ios", "web"]] = None

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Token is required")
        return v


def _to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        type=notification.type,
        title=notification.title,
        body=notification.body,
        data=notification.data,
        isRead=notification.is_read,
        createdAt=notification.created_at,
    )


@router.get("", response_model=list[NotificationResponse])
async def get_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Latest 50 notifications for the current user, newest first"""
    notifications = (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(50)
        .all()
    )
    return [_to_response(n) for n in notifications]


@router.patch("/mark-all-read")
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mark every unread notification of the current user as read"""
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    logger.info(f"✅ Marked {updated} notification(s) read for user {current_user.id}")
    return {"success": True, "updated": updated}


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mark a single notification as read (owner only)"""
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    if notification.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Forbidden")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return _to_response(notification)


@router.post("/register")
async def register_device(
    data: DeviceRegisterRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Register (or re-register) a push token for the current user"""
    platform = data.platform or "unknown"
    device = db.query(Device).filter(Device.token == data.token).first()
    if device:
        # Tokens follow the handset, so a re-login moves the token to the new user
        device.user_id = current_user.id
        device.platform = platform
    else:
        device = Device(user_id=current_user.id, token=data.token, platform=platform)
        db.add(device)

    db.commit()
    db.refresh(device)
    logger.info(f"📱 Device registered for user {current_user.id} ({platform})")

    return {
        "message": "Device registered successfully",
        "device": {"id": device.id, "token": device.token, "platform": device.platform},
    }
