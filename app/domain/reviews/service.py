"""Review service - Business logic for session reviews"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...constants.statuses import AppSessionStatus, UserRole
from ...models import Review, User
from ..sessions.repository import SessionRepository
from .repository import ReviewRepository
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:
    """Service layer for review business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()
        self.sessions = SessionRepository()

    def create_review(self, data: ReviewCreate, user: User) -> Review:
        """
        Record the client's rating of a completed session

        Checks run in order: session exists, caller is its client, session is
        COMPLETED, no review yet. Reviews are immutable once written.
        """
        session = self.sessions.get_session_by_id(self.db, data.sessionId)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        if session.client_id != user.id:
            raise HTTPException(
                status_code=403, detail="Only the client who booked the session can review it"
            )
        if session.status != AppSessionStatus.COMPLETED.value:
            raise HTTPException(status_code=400, detail="Only completed sessions can be reviewed")
        if self.repo.get_review_for_session(self.db, session.id):
            raise HTTPException(status_code=409, detail="This session has already been reviewed")

        try:
            review = self.repo.create_review(
                self.db,
                session_id=session.id,
                client_id=session.client_id,
                provider_id=session.provider_id,
                rating=data.rating,
                comment=data.comment,
            )
        except IntegrityError:
            # A concurrent submission for the same session won
            self.db.rollback()
            logger.warning(f"⚠️ Duplicate review for session {session.id} rejected")
            raise HTTPException(status_code=409, detail="This session has already been reviewed") from None

        logger.info(f"✅ Review {review.id} ({data.rating}★) stored for session {session.id}")
        return review

    def get_provider_reviews(self, provider_id: int) -> dict:
        provider = (
            self.db.query(User)
            .filter(User.id == provider_id, User.role == UserRole.PROVIDER.value)
            .first()
        )
        if not provider:
            raise HTTPException(status_code=404, detail="Provider not found")

        average, count = self.repo.get_rating_summary(self.db, provider_id)
        return {
            "providerId": provider_id,
            "averageRating": average,
            "count": count,
            "reviews": self.repo.get_reviews_for_provider(self.db, provider_id),
        }
