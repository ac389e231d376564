"""
Identity verification (KYC) endpoints

Providers upload ID documents elsewhere and submit the resulting URLs here;
an admin then approves or rejects the submission.
"""

import logging
from datetime import datetime
from typing import Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_admin
from ..clock import Clock, get_clock
from ..constants.statuses import KycStatus, NotificationType
from ..database import get_db
from ..models import User
from ..services.notification_service import send_notification
from ..shared.validators import clean_text, validate_http_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Verification"])


class KycSubmitRequest(BaseModel):
    idFront: str
    idBack: str
    selfie: str

    @field_validator("idFront", "idBack", "selfie")
    @classmethod
    def validate_document_url(cls, v: str) -> str:
        return validate_http_url(v)


class KycReviewRequest(BaseModel):
    status: Literal["VERIFIED", "REJECTED"]
    reason: Optional[str] = None

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return clean_text(v, max_length=1000)


class KycStatusResponse(BaseModel):
    status: str
    kycSubmittedAt: Optional[datetime] = None
    kycVerifiedAt: Optional[datetime] = None
    kycRejectionReason: Optional[str] = None


def _status_response(user: User) -> KycStatusResponse:
    return KycStatusResponse(
        status=user.kyc_status,
        kycSubmittedAt=user.kyc_submitted_at,
        kycVerifiedAt=user.kyc_verified_at,
        kycRejectionReason=user.kyc_rejection_reason,
    )


@router.post("/kyc/submit", response_model=KycStatusResponse)
async def submit_kyc(
    data: KycSubmitRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Submit identity documents for review"""
    logger.info(f"📥 KYC submission from user {current_user.id}")

    current_user.kyc_status = KycStatus.SUBMITTED.value
    current_user.kyc_submitted_at = clock.now()
    current_user.kyc_rejection_reason = None
    current_user.id_front_url = data.idFront
    current_user.id_back_url = data.idBack
    current_user.selfie_url = data.selfie
    db.commit()
    db.refresh(current_user)

    return _status_response(current_user)


@router.get("/kyc/status", response_model=KycStatusResponse)
async def get_kyc_status(current_user: User = Depends(get_current_user)):
    """Current verification state of the authenticated user"""
    return _status_response(current_user)


@router.post("/admin/kyc/{user_id}/review", response_model=KycStatusResponse)
async def review_kyc(
    user_id: int,
    data: KycReviewRequest,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Approve or reject a submitted verification (admin only)"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.kyc_status != KycStatus.SUBMITTED.value:
        raise HTTPException(status_code=409, detail="No pending verification for this user")

    if data.status == KycStatus.VERIFIED.value:
        user.kyc_status = KycStatus.VERIFIED.value
        user.kyc_verified_at = clock.now()
        user.kyc_rejection_reason = None
        title, body = "Verification approved", "Your identity has been verified."
    else:
        user.kyc_status = KycStatus.REJECTED.value
        user.kyc_rejection_reason = data.reason
        title = "Verification rejected"
        body = data.reason or "Your identity documents could not be verified."

    db.commit()
    db.refresh(user)
    logger.info(f"✅ Admin {admin.id} set KYC of user {user.id} to {user.kyc_status}")

    send_notification(
        db,
        background_tasks,
        user.id,
        NotificationType.KYC_UPDATE.value,
        title,
        body,
        {"status": user.kyc_status},
    )
    return _status_response(user)
