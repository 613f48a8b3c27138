import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .config import SUPABASE_JWT_AUDIENCE, SUPABASE_JWT_SECRET
from .constants import USER_TYPES
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)

security = HTTPBearer()

JWT_ALGORITHM = "HS256"


def verify_access_token(token: str) -> dict:
    """
    Verify an access token issued by the auth provider.
    Checks the HS256 signature, expiry and audience, and requires a subject.
    """
    token_parts = token.split(".")
    if len(token_parts) != 3:
        logger.warning(f"⚠️ Malformed token received: {len(token_parts)} parts")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    try:
        payload = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError as e:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        ) from e
    except JWTError as e:
        logger.warning(f"❌ Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Token verification failed") from e

    if not payload.get("sub"):
        logger.error(f"❌ Token missing subject claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return payload


def _get_or_create_user(db: Session, claims: dict) -> User:
    user_id = claims["sub"]
    user = db.query(User).filter(User.id == user_id).first()
    if user:
        return user

    metadata = claims.get("user_metadata") or {}
    user_type = metadata.get("user_type")
    if user_type not in USER_TYPES:
        user_type = "client"

    logger.info(f"🆕 Creating local user for {claims.get('email')}")
    user = User(
        id=user_id,
        email=claims.get("email") or f"{user_id}@users.noreply",
        name=metadata.get("name") or metadata.get("full_name"),
        user_type=user_type,
        is_verified=bool(claims.get("email_confirmed_at") or metadata.get("email_verified")),
    )
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"❌ Email {claims.get('email')} already belongs to another account")
        raise HTTPException(
            status_code=409,
            detail="This email is already registered. Please sign in with your existing account.",
        ) from e
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    claims = verify_access_token(credentials.credentials)
    user = _get_or_create_user(db, claims)

    if not user.is_active:
        logger.warning(f"⚠️ Deactivated user {user.id} attempted to authenticate")
        raise HTTPException(status_code=403, detail="Account is deactivated")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user

