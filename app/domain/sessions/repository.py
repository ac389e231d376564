"""Session repository - Database operations for app sessions"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import AppSession


class SessionRepository:
    """Repository for app session database operations"""

    @staticmethod
    def get_session_by_id(db: Session, session_id: int) -> Optional[AppSession]:
        return db.query(AppSession).filter(AppSession.id == session_id).first()

    @staticmethod
    def get_sessions_for_user(
        db: Session, user_id: int, status: Optional[str] = None, limit: int = 20, offset: int = 0
    ) -> list[AppSession]:
        """Sessions the user takes part in, latest start first"""
        query = (
            db.query(AppSession)
            .options(
                joinedload(AppSession.client),
                joinedload(AppSession.provider),
                joinedload(AppSession.service),
            )
            .filter(or_(AppSession.client_id == user_id, AppSession.provider_id == user_id))
        )
        if status:
            query = query.filter(AppSession.status == status)
        return query.order_by(AppSession.start_time.desc(), AppSession.id.desc()).offset(offset).limit(limit).all()
