import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Header
from jose import JWTError, jwt
from pydantic import ValidationError

from .config import get_settings
from .constants import ErrorMessages
from .exceptions import AuthenticationRequiredError
from .schemas import TokenData

logger = logging.getLogger(__name__)

# Claims copied from the user record into the session token
TOKEN_CLAIMS = ("id", "email", "name", "provider", "picture")


# --- JWT Token Handling ---

def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Creates a signed session token carrying the user's identity claims."""
    settings = get_settings()
    to_encode = {key: data.get(key) for key in TOKEN_CLAIMS}
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def authenticate(token: Optional[str]) -> Optional[TokenData]:
    """
    Verifies a bearer token and returns its identity claims.
    Returns None for a missing, malformed, tampered or expired token.
    """
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return TokenData.model_validate({key: payload.get(key) for key in TOKEN_CLAIMS})
    except JWTError as e:
        logger.info(f"JWT decode failed: {e}")
        return None
    except ValidationError:
        logger.info("JWT payload is missing identity claims")
        return None


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip() or None
    return None


def get_current_user(authorization: Optional[str] = Header(None)) -> TokenData:
    """
    Resolves the caller from the Authorization header.
    Runs before any session is used, so an unauthenticated call never reaches the database.
    """
    # Log presence only, never the token itself
    logger.debug(f"get_current_user called, Authorization header present: {bool(authorization)}")

    token = extract_bearer_token(authorization)
    if not token:
        raise AuthenticationRequiredError(ErrorMessages.AUTH_REQUIRED)

    user = authenticate(token)
    if user is None:
        raise AuthenticationRequiredError(ErrorMessages.INVALID_TOKEN)
    return user


def get_optional_user(authorization: Optional[str] = Header(None)) -> Optional[TokenData]:
    """Same as get_current_user, but anonymous callers get None instead of an error."""
    return authenticate(extract_bearer_token(authorization))
