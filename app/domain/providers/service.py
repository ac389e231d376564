"""Provider directory service - profiles, search, favorites and earnings"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...clock import Clock
from ...constants.statuses import PayoutStatus
from ...models import Favorite, Follow, User
from ..sessions.service import session_minutes
from ..wallet.repository import WalletRepository
from .repository import ProviderRepository

logger = logging.getLogger(__name__)


def month_start(moment: datetime, months_back: int = 0) -> datetime:
    """Midnight on the first day of the month ``months_back`` before ``moment``"""
    month_index = moment.year * 12 + (moment.month - 1) - months_back
    return datetime(month_index // 12, month_index % 12 + 1, 1)


class ProviderDirectoryService:
    """Service layer for the public side of providers"""

    def __init__(self, db: Session, clock: Clock):
        self.db = db
        self.clock = clock
        self.repo = ProviderRepository()
        self.wallets = WalletRepository()

    def get_provider(self, provider_id: int) -> User:
        provider = self.repo.get_provider(self.db, provider_id)
        if not provider:
            raise HTTPException(status_code=404, detail="Provider not found")
        return provider

    def get_profile(self, provider_id: int) -> dict:
        """Provider with active services, latest 10 reviews and rating over all reviews"""
        provider = self.get_provider(provider_id)
        average, count = self.repo.get_rating_summaries(self.db, [provider.id]).get(provider.id, (0.0, 0))
        return {
            "provider": provider,
            "rating": round(average, 1),
            "reviewCount": count,
            "services": self.repo.get_active_services(self.db, [provider.id]),
            "reviews": self.repo.get_recent_reviews(self.db, provider.id),
        }

    def _cards(self, providers: list[User], user: User) -> list[dict]:
        """Decorate providers with services, rating and the viewer's favorite/follow flags"""
        ids = [p.id for p in providers]
        services = self.repo.get_active_services(self.db, ids)
        ratings = self.repo.get_rating_summaries(self.db, ids)
        favorites = self.repo.get_favorite_provider_ids(self.db, user.id)
        following = self.repo.get_followed_provider_ids(self.db, user.id)

        cards = []
        for provider in providers:
            average, count = ratings.get(provider.id, (0.0, 0))
            cards.append(
                {
                    "provider": provider,
                    "rating": round(average, 1),
                    "reviewCount": count,
                    "services": [s for s in services if s.provider_id == provider.id],
                    "isFavorite": provider.id in favorites,
                    "isFollowing": provider.id in following,
                }
            )
        return cards

    def search(
        self,
        user: User,
        query: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> list[dict]:
        if min_price is not None and max_price is not None and min_price > max_price:
            raise HTTPException(status_code=400, detail="minPrice cannot be greater than maxPrice")

        query = query.strip() if query else None
        providers = self.repo.search_providers(self.db, query, category, min_price, max_price)
        logger.info(f"🔎 Provider search q={query!r} category={category!r}: {len(providers)} result(s)")
        return self._cards(providers, user)

    # ------------------------------------------------------------------
    # Favorites / following
    # ------------------------------------------------------------------

    def _target(self, provider_id: int, user: User, action: str) -> User:
        if provider_id == user.id:
            raise HTTPException(status_code=400, detail=f"Cannot {action} yourself")
        return self.get_provider(provider_id)

    def add_favorite(self, provider_id: int, user: User) -> str:
        self._target(provider_id, user, "favorite")
        if self.repo.get_favorite(self.db, user.id, provider_id):
            return "Already favorited"
        try:
            self.db.add(Favorite(user_id=user.id, provider_id=provider_id))
            self.db.commit()
        except IntegrityError:
            # A concurrent request saved the same favorite first
            self.db.rollback()
            return "Already favorited"
        logger.info(f"⭐ User {user.id} favorited provider {provider_id}")
        return "Favorited successfully"

    def remove_favorite(self, provider_id: int, user: User) -> str:
        favorite = self.repo.get_favorite(self.db, user.id, provider_id)
        if favorite:
            self.db.delete(favorite)
            self.db.commit()
        return "Unfavorited successfully"

    def toggle_follow(self, provider_id: int, user: User) -> bool:
        """Follow the provider, or unfollow if already following; returns the new state"""
        self._target(provider_id, user, "follow")
        follow = self.repo.get_follow(self.db, user.id, provider_id)
        if follow:
            self.db.delete(follow)
            self.db.commit()
            logger.info(f"✅ User {user.id} unfollowed provider {provider_id}")
            return False

        try:
            self.db.add(Follow(follower_id=user.id, provider_id=provider_id))
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
        logger.info(f"✅ User {user.id} followed provider {provider_id}")
        return True

    def get_favorites(self, user: User) -> list[dict]:
        return self._cards(self.repo.get_favorite_providers(self.db, user.id), user)

    def get_following(self, user: User) -> list[dict]:
        return self._cards(self.repo.get_followed_providers(self.db, user.id), user)

    # ------------------------------------------------------------------
    # Earnings
    # ------------------------------------------------------------------

    def get_earnings(self, provider: User) -> dict:
        """
        Earnings summary of a provider

        Derived from COMPLETED sessions (locked price and session length) and
        from the provider's wallet and payout requests. Month boundaries are
        UTC calendar months of the injected clock.
        """
        now = self.clock.now()
        current_month = month_start(now)
        previous_month = month_start(now, months_back=1)

        total_minutes = current_minutes = previous_minutes = 0
        total_earnings = current_earnings = 0.0
        for session in self.repo.get_completed_sessions(self.db, provider.id):
            minutes = session_minutes(session)
            total_minutes += minutes
            total_earnings += session.price or 0.0
            if session.start_time >= current_month:
                current_minutes += minutes
                current_earnings += session.price or 0.0
            elif session.start_time >= previous_month:
                previous_minutes += minutes

        growth = 0.0
        if previous_minutes > 0:
            growth = round((current_minutes - previous_minutes) / previous_minutes * 100, 1)

        wallet = self.wallets.get_wallet(self.db, provider.id)
        pending = sum(
            p.amount
            for p in self.repo.get_payouts_for_user(self.db, provider.id)
            if p.status == PayoutStatus.PENDING.value
        )
        last_payout = self.repo.get_last_approved_payout(self.db, provider.id)

        return {
            "totalMinutesServiced": total_minutes,
            "currentMonthMinutes": current_minutes,
            "totalEarnings": round(total_earnings, 2),
            "currentMonthEarnings": round(current_earnings, 2),
            "availableBalance": wallet.balance if wallet else 0.0,
            "pendingPayout": round(pending, 2),
            "lastPayoutDate": last_payout.processed_at if last_payout else None,
            "lastPayoutAmount": last_payout.amount if last_payout else None,
            "minutesGrowthPercent": growth,
        }
