"""Wallet repository - Database operations for wallets and the ledger

Writes here only stage rows (add/flush); the calling service owns the commit
so balance changes and their ledger rows land in one transaction.
"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import MinutePurchase, MinuteUsage, PayoutRequest, Wallet, WalletTransaction


class WalletRepository:
    """Repository for wallet database operations"""

    @staticmethod
    def get_wallet(db: Session, user_id: int) -> Optional[Wallet]:
        return db.query(Wallet).filter(Wallet.user_id == user_id).first()

    @staticmethod
    def get_or_create_wallet(db: Session, user_id: int) -> Wallet:
        """Get the user's wallet, staging an empty one if missing"""
        wallet = db.query(Wallet).filter(Wallet.user_id == user_id).first()
        if not wallet:
            wallet = Wallet(user_id=user_id, balance=0.0, available_minutes=0, total_minutes_purchased=0)
            db.add(wallet)
            db.flush()
        return wallet

    @staticmethod
    def add_transaction(
        db: Session,
        wallet: Wallet,
        amount: float,
        type: str,
        status: str,
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> WalletTransaction:
        """Stage a ledger row"""
        transaction = WalletTransaction(
            wallet_id=wallet.id,
            amount=amount,
            type=type,
            status=status,
            description=description,
            reference=reference,
        )
        db.add(transaction)
        db.flush()
        return transaction

    @staticmethod
    def get_recent_purchases(db: Session, wallet_id: int, limit: int = 5) -> list[MinutePurchase]:
        return (
            db.query(MinutePurchase)
            .filter(MinutePurchase.wallet_id == wallet_id)
            .order_by(MinutePurchase.created_at.desc(), MinutePurchase.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_recent_usage(db: Session, wallet_id: int, limit: int = 5) -> list[MinuteUsage]:
        return (
            db.query(MinuteUsage)
            .filter(MinuteUsage.wallet_id == wallet_id)
            .order_by(MinuteUsage.created_at.desc(), MinuteUsage.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_transactions(db: Session, wallet_id: int) -> list[WalletTransaction]:
        return (
            db.query(WalletTransaction)
            .filter(WalletTransaction.wallet_id == wallet_id)
            .order_by(WalletTransaction.created_at.desc(), WalletTransaction.id.desc())
            .all()
        )

    @staticmethod
    def get_payout_by_id(db: Session, payout_id: int) -> Optional[PayoutRequest]:
        return db.query(PayoutRequest).filter(PayoutRequest.id == payout_id).first()

    @staticmethod
    def get_payouts(db: Session, status: Optional[str] = None) -> list[PayoutRequest]:
        query = db.query(PayoutRequest)
        if status:
            query = query.filter(PayoutRequest.status == status)
        return query.order_by(PayoutRequest.created_at.desc(), PayoutRequest.id.desc()).all()
