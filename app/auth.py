import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import SESSION_COOKIE_NAME
from .constants.statuses import UserRole
from .database import get_db
from .models import User
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

# auto_error=False so cookie-authenticated browser requests are not rejected up front
security = HTTPBearer(auto_error=False)


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer token (mobile) first, then the session cookie (web)"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE_NAME)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated user from a Bearer token or session cookie"""
    token = _extract_token(request, credentials)
    if not token:
        logger.debug(f"No credentials provided for {request.url.path}")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    # Basic token format validation before processing
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    payload = verify_jwt_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        logger.error(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims") from None

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        # Stale token for a deleted account
        logger.warning(f"⚠️ Token subject {user_id} has no matching user")
        raise HTTPException(status_code=401, detail="User account not found")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


async def require_provider(user: User = Depends(get_current_user)) -> User:
    """Restrict a route to service providers"""
    if user.role != UserRole.PROVIDER.value:
        logger.warning(f"⚠️ User {user.id} attempted provider-only route")
        raise HTTPException(status_code=403, detail="Forbidden: Providers only")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Restrict a route to platform administrators"""
    if user.role != UserRole.ADMIN.value:
        logger.warning(f"⚠️ User {user.id} attempted admin-only route")
        raise HTTPException(status_code=403, detail="Forbidden: Admins only")
    return user
