# app/core/jwt.py

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt, ExpiredSignatureError
from fastapi import HTTPException, status

from app.core.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

ACCESS_SCOPE = "access"
REFRESH_SCOPE = "refresh"

# --- JWT Token Management ---

def _encode(data: dict, expire: datetime, scope: str) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": expire, "scope": scope})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
):
    """Create an access token"""
    try:
        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
        return _encode(data, expire, ACCESS_SCOPE)
    except Exception as e:
        logger.error("Error creating access token", error_message=str(e))
        raise e


def create_refresh_token(data: dict):
    """Create a refresh token"""
    try:
        expire = datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days)
        return _encode(data, expire, REFRESH_SCOPE)
    except Exception as e:
        logger.error("Error creating refresh token", error_message=str(e))
        raise e


def verify_token(token: str, scope: str = ACCESS_SCOPE) -> dict:
    """Verify a token and check that it was issued for the given scope"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError as ese:
        logger.warning("Token has expired.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        ) from ese
    except JWTError as e:
        logger.warning("Error verifying token", error_message=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    if payload.get("scope") != scope:
        logger.warning("Token used outside its scope", scope=payload.get("scope"))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token scope",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload
