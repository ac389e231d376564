"""Wallet router - FastAPI endpoints for wallet, packages and payouts"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...clock import Clock, get_clock
from ...database import get_db
from ...models import PayoutRequest, User
from .packages import MINUTE_PACKAGES
from .schemas import (
    BalanceResponse,
    MinutePackageResponse,
    MinutePurchaseResponse,
    MinuteUsageResponse,
    PayoutCreate,
    PayoutResponse,
    PayoutReview,
    PurchaseRequest,
    TransactionResponse,
    WalletResponse,
)
from .service import WalletService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wallet", tags=["Wallet"])
packages_router = APIRouter(tags=["Wallet"])
admin_router = APIRouter(prefix="/admin/payouts", tags=["Admin"])


def get_wallet_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> WalletService:
    """Dependency injection for WalletService"""
    return WalletService(db, clock, background_tasks)


def _purchase_to_response(p) -> MinutePurchaseResponse:
    return MinutePurchaseResponse(
        id=p.id,
        packageName=p.package_name,
        minutesPurchased=p.minutes_purchased,
        price=p.price,
        paymentMethod=p.payment_method,
        paymentStatus=p.payment_status,
        transactionRef=p.transaction_ref,
        createdAt=p.created_at,
    )


def _payout_to_response(p: PayoutRequest, message: Optional[str] = None) -> PayoutResponse:
    return PayoutResponse(
        id=p.id,
        walletId=p.wallet_id,
        amount=p.amount,
        status=p.status,
        createdAt=p.created_at,
        processedAt=p.processed_at,
        message=message,
    )


@router.get("", response_model=WalletResponse)
async def get_wallet(
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
):
    """Wallet with recent purchases and minute usage"""
    wallet, purchases, usage = service.get_wallet(current_user)
    return WalletResponse(
        id=wallet.id,
        userId=wallet.user_id,
        balance=wallet.balance,
        availableMinutes=wallet.available_minutes,
        totalMinutesPurchased=wallet.total_minutes_purchased,
        minutePurchases=[_purchase_to_response(p) for p in purchases],
        minuteUsage=[
            MinuteUsageResponse(id=u.id, sessionId=u.session_id, minutesUsed=u.minutes_used, createdAt=u.created_at)
            for u in usage
        ],
    )


@router.get("/balance", response_model=BalanceResponse)
async def get_balance(
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
):
    return service.get_balance(current_user)


@router.get("/transactions", response_model=list[TransactionResponse])
async def get_transactions(
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
):
    """Ledger rows of the current user's wallet, newest first"""
    return [
        TransactionResponse(
            id=t.id,
            amount=t.amount,
            type=t.type,
            status=t.status,
            description=t.description,
            reference=t.reference,
            createdAt=t.created_at,
        )
        for t in service.get_transactions(current_user)
    ]


@router.post("/purchase", response_model=MinutePurchaseResponse, status_code=201)
async def purchase_minutes(
    data: PurchaseRequest,
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
):
    """Buy a minute package"""
    return _purchase_to_response(service.purchase_minutes(data, current_user))


@router.post("/payout", response_model=PayoutResponse, status_code=201)
async def request_payout(
    data: PayoutCreate,
    current_user: User = Depends(get_current_user),
    service: WalletService = Depends(get_wallet_service),
):
    """Withdraw earnings; the amount is held until an admin reviews it"""
    payout = service.request_payout(data, current_user)
    return _payout_to_response(payout, message="Payout request submitted.")


@packages_router.get("/minute-packages", response_model=list[MinutePackageResponse])
async def get_minute_packages(current_user: User = Depends(get_current_user)):
    return MINUTE_PACKAGES


@admin_router.get("", response_model=list[PayoutResponse])
async def list_payouts(
    status: Optional[Literal["PENDING", "APPROVED", "REJECTED"]] = Query(None),
    admin: User = Depends(require_admin),
    service: WalletService = Depends(get_wallet_service),
):
    return [_payout_to_response(p) for p in service.get_payouts(status)]


@admin_router.post("/{payout_id}/review", response_model=PayoutResponse)
async def review_payout(
    payout_id: int,
    data: PayoutReview,
    admin: User = Depends(require_admin),
    service: WalletService = Depends(get_wallet_service),
):
    """Approve or reject a pending payout (admin only)"""
    return _payout_to_response(service.review_payout(payout_id, data.status, admin))
