"""Review repository - Database operations for reviews"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Review


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_review_for_session(db: Session, session_id: int) -> Optional[Review]:
        return db.query(Review).filter(Review.session_id == session_id).first()

    @staticmethod
    def get_reviews_for_provider(db: Session, provider_id: int) -> list[Review]:
        return (
            db.query(Review)
            .options(joinedload(Review.client))
            .filter(Review.provider_id == provider_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    @staticmethod
    def get_rating_summary(db: Session, provider_id: int) -> tuple[Optional[float], int]:
        """Average rating and review count of a provider"""
        average, count = (
            db.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.provider_id == provider_id)
            .one()
        )
        return (round(float(average), 2) if average is not None else None), count

    @staticmethod
    def create_review(db: Session, **review_data) -> Review:
        """Insert a review; the unique session_id rejects a second one"""
        review = Review(**review_data)
        db.add(review)
        db.commit()
        db.refresh(review)
        return review
