"""
Notification Service
Stores in-app notifications and fans them out to the user's registered devices
"""

import logging
from typing import Any, Optional

import httpx
from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from ..config import PUSH_GATEWAY_TIMEOUT, PUSH_GATEWAY_URL
from ..models import Device, Notification

logger = logging.getLogger(__name__)


async def send_push_notification(tokens: list[str], title: str, body: str, data: Optional[dict] = None) -> bool:
    """
    Deliver a push message to device tokens through the configured gateway

    The payload follows the Expo push format (one message per token). When no
    gateway is configured the delivery is only logged.

    Returns:
        True if the gateway accepted the batch (or delivery is log-only)
    """
    if not tokens:
        return True

    if not PUSH_GATEWAY_URL:
        logger.info(f"📱 [PUSH disabled] {len(tokens)} device(s): {title} - {body}")
        return True

    messages = [
        {"to": token, "sound": "default", "title": title, "body": body, "data": data or {}}
        for token in tokens
    ]
    try:
        async with httpx.AsyncClient(timeout=PUSH_GATEWAY_TIMEOUT) as client:
            response = await client.post(PUSH_GATEWAY_URL, json=messages)
            response.raise_for_status()
        logger.info(f"✅ Push sent to {len(tokens)} device(s)")
        return True
    except httpx.HTTPError as e:
        logger.error(f"❌ Push gateway delivery failed: {e}")
        return False


def send_notification(
    db: Session,
    background_tasks: BackgroundTasks,
    user_id: int,
    notification_type: str,
    title: str,
    body: str,
    data: Optional[dict[str, Any]] = None,
) -> Optional[Notification]:
    """
    Persist a notification and schedule a push to every device of the user

    The push runs as a background task after the response is sent. Storage
    failures are logged and swallowed: a notification must never break the
    booking or wallet flow that triggered it. Call after the business
    transaction has been committed.

    Returns:
        The stored Notification, or None if it could not be stored
    """
    try:
        notification = Notification(
            user_id=user_id,
            type=notification_type,
            title=title,
            body=body,
            data=data or {},
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Failed to store {notification_type} notification for user {user_id}: {e}")
        return None

    tokens = [d.token for d in db.query(Device).filter(Device.user_id == user_id).all()]
    if tokens:
        background_tasks.add_task(send_push_notification, tokens, title, body, data)

    logger.info(f"🔔 {notification_type} notification stored for user {user_id}")
    return notification
