"""Provider directory repository - Database operations for public provider data"""

from typing import Optional

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session, joinedload

from ...constants.statuses import AppSessionStatus, KycStatus, PayoutStatus, UserRole
from ...models import AppSession, Favorite, Follow, PayoutRequest, Review, Service, User, Wallet


class ProviderRepository:
    """Repository for provider directory database operations"""

    @staticmethod
    def get_provider(db: Session, provider_id: int) -> Optional[User]:
        return (
            db.query(User)
            .filter(User.id == provider_id, User.role == UserRole.PROVIDER.value)
            .first()
        )

    @staticmethod
    def get_active_services(db: Session, provider_ids: list[int]) -> list[Service]:
        """Active services of the given providers, cheapest first"""
        if not provider_ids:
            return []
        return (
            db.query(Service)
            .filter(Service.provider_id.in_(provider_ids), Service.is_active.is_(True))
            .order_by(Service.price.asc(), Service.id.asc())
            .all()
        )

    @staticmethod
    def get_recent_reviews(db: Session, provider_id: int, limit: int = 10) -> list[Review]:
        return (
            db.query(Review)
            .options(joinedload(Review.client))
            .filter(Review.provider_id == provider_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_rating_summaries(db: Session, provider_ids: list[int]) -> dict[int, tuple[float, int]]:
        """Average rating and review count per provider"""
        if not provider_ids:
            return {}
        rows = (
            db.query(Review.provider_id, func.avg(Review.rating), func.count(Review.id))
            .filter(Review.provider_id.in_(provider_ids))
            .group_by(Review.provider_id)
            .all()
        )
        return {provider_id: (float(average), count) for provider_id, average, count in rows}

    @staticmethod
    def search_providers(
        db: Session,
        query: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> list[User]:
        """Verified providers matching a name/service text and service filters"""
        q = db.query(User).filter(
            User.role == UserRole.PROVIDER.value,
            User.kyc_status == KycStatus.VERIFIED.value,
        )

        if query:
            pattern = f"%{query}%"
            q = q.filter(
                or_(
                    User.name.ilike(pattern),
                    User.services.any(and_(Service.is_active.is_(True), Service.title.ilike(pattern))),
                )
            )

        service_filters = []
        if category:
            service_filters.append(func.lower(Service.category) == category.lower())
        if min_price is not None:
            service_filters.append(Service.price >= min_price)
        if max_price is not None:
            service_filters.append(Service.price <= max_price)
        if service_filters:
            q = q.filter(User.services.any(and_(Service.is_active.is_(True), *service_filters)))

        return q.order_by(User.name.asc(), User.id.asc()).all()

    # Favorites / following

    @staticmethod
    def get_favorite(db: Session, user_id: int, provider_id: int) -> Optional[Favorite]:
        return (
            db.query(Favorite)
            .filter(Favorite.user_id == user_id, Favorite.provider_id == provider_id)
            .first()
        )

    @staticmethod
    def get_follow(db: Session, follower_id: int, provider_id: int) -> Optional[Follow]:
        return (
            db.query(Follow)
            .filter(Follow.follower_id == follower_id, Follow.provider_id == provider_id)
            .first()
        )

    @staticmethod
    def get_favorite_provider_ids(db: Session, user_id: int) -> set[int]:
        rows = db.query(Favorite.provider_id).filter(Favorite.user_id == user_id).all()
        return {provider_id for (provider_id,) in rows}

    @staticmethod
    def get_followed_provider_ids(db: Session, user_id: int) -> set[int]:
        rows = db.query(Follow.provider_id).filter(Follow.follower_id == user_id).all()
        return {provider_id for (provider_id,) in rows}

    @staticmethod
    def get_favorite_providers(db: Session, user_id: int) -> list[User]:
        return (
            db.query(User)
            .join(Favorite, Favorite.provider_id == User.id)
            .filter(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .all()
        )

    @staticmethod
    def get_followed_providers(db: Session, user_id: int) -> list[User]:
        return (
            db.query(User)
            .join(Follow, Follow.provider_id == User.id)
            .filter(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
            .all()
        )

    # Earnings

    @staticmethod
    def get_completed_sessions(db: Session, provider_id: int) -> list[AppSession]:
        return (
            db.query(AppSession)
            .filter(
                AppSession.provider_id == provider_id,
                AppSession.status == AppSessionStatus.COMPLETED.value,
            )
            .all()
        )

    @staticmethod
    def get_payouts_for_user(db: Session, user_id: int) -> list[PayoutRequest]:
        return (
            db.query(PayoutRequest)
            .join(Wallet, PayoutRequest.wallet_id == Wallet.id)
            .filter(Wallet.user_id == user_id)
            .all()
        )

    @staticmethod
    def get_last_approved_payout(db: Session, user_id: int) -> Optional[PayoutRequest]:
        return (
            db.query(PayoutRequest)
            .join(Wallet, PayoutRequest.wallet_id == Wallet.id)
            .filter(Wallet.user_id == user_id, PayoutRequest.status == PayoutStatus.APPROVED.value)
            .order_by(PayoutRequest.processed_at.desc(), PayoutRequest.id.desc())
            .first()
        )
