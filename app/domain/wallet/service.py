"""Wallet service - Business logic for minutes, earnings and payouts"""

import logging
from typing import Optional

from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.orm import Session

from ...clock import Clock
from ...constants.statuses import (
    NotificationType,
    PayoutStatus,
    TransactionStatus,
    TransactionType,
)
from ...models import AppSession, MinutePurchase, MinuteUsage, PayoutRequest, User, Wallet
from ...security_utils import mask_sensitive_data
from ...services.notification_service import send_notification
from .packages import get_package
from .repository import WalletRepository
from .schemas import PayoutCreate, PurchaseRequest

logger = logging.getLogger(__name__)


def stage_session_settlement(db: Session, session: AppSession, minutes: int) -> None:
    """
    Stage the wallet side of a completed session without committing

    The provider earns the session's locked price and the client spends the
    session's minutes (never below zero). The caller commits together with
    the status change.
    """
    repo = WalletRepository()

    provider_wallet = repo.get_or_create_wallet(db, session.provider_id)
    provider_wallet.balance = round((provider_wallet.balance or 0.0) + session.price, 2)
    repo.add_transaction(
        db,
        provider_wallet,
        amount=session.price,
        type=TransactionType.EARNING.value,
        status=TransactionStatus.COMPLETED.value,
        description=f"Session #{session.id} earnings",
        reference=f"SESSION-{session.id}",
    )

    client_wallet = repo.get_or_create_wallet(db, session.client_id)
    client_wallet.available_minutes = max(0, (client_wallet.available_minutes or 0) - minutes)
    db.add(MinuteUsage(wallet_id=client_wallet.id, session_id=session.id, minutes_used=minutes))
    db.flush()


class WalletService:
    """Service layer for wallet business logic"""

    def __init__(self, db: Session, clock: Clock, background_tasks: BackgroundTasks):
        self.db = db
        self.background_tasks = background_tasks
        self.clock = clock
        self.repo = WalletRepository()

    def get_wallet(self, user: User) -> tuple[Wallet, list[MinutePurchase], list[MinuteUsage]]:
        """Wallet with its 5 latest purchases and usages (created on first access)"""
        wallet = self.repo.get_wallet(self.db, user.id)
        if not wallet:
            wallet = self.repo.get_or_create_wallet(self.db, user.id)
            self.db.commit()
            self.db.refresh(wallet)
            logger.info(f"👛 Wallet created for user {user.id}")

        purchases = self.repo.get_recent_purchases(self.db, wallet.id)
        usage = self.repo.get_recent_usage(self.db, wallet.id)
        return wallet, purchases, usage

    def get_balance(self, user: User) -> dict:
        wallet = self.repo.get_wallet(self.db, user.id)
        return {
            "balance": wallet.balance if wallet else 0.0,
            "availableMinutes": wallet.available_minutes if wallet else 0,
        }

    def get_transactions(self, user: User):
        wallet = self.repo.get_wallet(self.db, user.id)
        if not wallet:
            return []
        return self.repo.get_transactions(self.db, wallet.id)

    def purchase_minutes(self, data: PurchaseRequest, user: User) -> MinutePurchase:
        """Buy a minute package; payment is settled immediately (no gateway)"""
        package = get_package(data.packageId)
        if not package:
            raise HTTPException(status_code=404, detail="Package not found")

        logger.info(f"📥 User {user.id} purchasing {package['id']} via {data.paymentMethod}")
        reference = f"REF-{self.clock.now().strftime('%Y%m%d%H%M%S%f')}"
        try:
            wallet = self.repo.get_or_create_wallet(self.db, user.id)
            purchase = MinutePurchase(
                wallet_id=wallet.id,
                package_name=package["name"],
                minutes_purchased=package["minutes"],
                price=package["price"],
                payment_method=data.paymentMethod,
                payment_status=TransactionStatus.COMPLETED.value,
                transaction_ref=reference,
            )
            self.db.add(purchase)
            wallet.available_minutes = (wallet.available_minutes or 0) + package["minutes"]
            wallet.total_minutes_purchased = (wallet.total_minutes_purchased or 0) + package["minutes"]
            self.repo.add_transaction(
                self.db,
                wallet,
                amount=package["price"],
                type=TransactionType.DEPOSIT.value,
                status=TransactionStatus.COMPLETED.value,
                description=f"{package['name']} package ({package['minutes']} minutes)",
                reference=reference,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"❌ Minute purchase failed for user {user.id}", exc_info=True)
            raise

        self.db.refresh(purchase)
        logger.info(f"✅ Purchase {purchase.id} completed: +{package['minutes']} minutes")
        return purchase

    def request_payout(self, data: PayoutCreate, user: User) -> PayoutRequest:
        """Move earnings out of the balance into a pending payout"""
        wallet = self.repo.get_wallet(self.db, user.id)
        if not wallet or (wallet.balance or 0.0) < data.amount:
            logger.warning(f"⚠️ Payout of {data.amount} refused for user {user.id}: insufficient balance")
            raise HTTPException(status_code=400, detail="Insufficient balance")

        logger.info(
            f"📥 Payout request {data.amount} for user {user.id} to {mask_sensitive_data(data.bankDetails)}"
        )
        try:
            wallet.balance = round(wallet.balance - data.amount, 2)
            transaction = self.repo.add_transaction(
                self.db,
                wallet,
                amount=data.amount,
                type=TransactionType.WITHDRAWAL.value,
                status=TransactionStatus.PENDING.value,
                description="Payout Request",
            )
            payout = PayoutRequest(
                wallet_id=wallet.id,
                transaction_id=transaction.id,
                amount=data.amount,
                status=PayoutStatus.PENDING.value,
                bank_details=data.bankDetails,
            )
            self.db.add(payout)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"❌ Payout request failed for user {user.id}", exc_info=True)
            raise

        self.db.refresh(payout)
        logger.info(f"✅ Payout {payout.id} pending for user {user.id}")
        return payout

    def get_payouts(self, status: Optional[str] = None) -> list[PayoutRequest]:
        return self.repo.get_payouts(self.db, status)

    def review_payout(self, payout_id: int, status: str, admin: User) -> PayoutRequest:
        """
        Approve or reject a pending payout

        Approval completes the withdrawal ledger row. Rejection refunds the
        amount to the balance and fails the ledger row.
        """
        payout = self.repo.get_payout_by_id(self.db, payout_id)
        if not payout:
            raise HTTPException(status_code=404, detail="Payout request not found")
        if payout.status != PayoutStatus.PENDING.value:
            raise HTTPException(status_code=409, detail=f"Payout already {payout.status}")

        try:
            payout.status = status
            payout.processed_at = self.clock.now()
            if status == PayoutStatus.APPROVED.value:
                if payout.transaction:
                    payout.transaction.status = TransactionStatus.COMPLETED.value
            else:
                payout.wallet.balance = round((payout.wallet.balance or 0.0) + payout.amount, 2)
                if payout.transaction:
                    payout.transaction.status = TransactionStatus.FAILED.value
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"❌ Payout review failed for payout {payout_id}", exc_info=True)
            raise

        self.db.refresh(payout)
        logger.info(f"✅ Admin {admin.id} {status} payout {payout.id}")

        send_notification(
            self.db,
            self.background_tasks,
            payout.wallet.user_id,
            NotificationType.PAYOUT_UPDATE.value,
            f"Payout {status.lower()}",
            f"Your payout of {payout.amount:.2f} was {status.lower()}.",
            {"payoutId": payout.id, "status": status},
        )
        return payout
