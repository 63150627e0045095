"""
Authentication: resolve the calling user's id from a bearer token
"""

import logging

from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth

from playconnect.core.config import settings
from playconnect.services.firebase_client import verify_id_token

logger = logging.getLogger(__name__)

security = HTTPBearer()

def get_current_user_id(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Return the authenticated user's id.

    With Firebase enabled the token is a Firebase Auth ID token. Without it,
    and only when DEV_AUTH is on, the token itself is the user id.
    """
    token = credentials.credentials
    if settings.USE_FIREBASE:
        try:
            return verify_id_token(token)
        except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
            logger.warning(f"Rejected ID token: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication token"
            )
    if settings.DEV_AUTH and token:
        return token
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication is not configured"
    )
