# Implements session token functionality for anonymous identities:
# JWT token generation bound to an identity id
# Token verification returning the identity id (or None)

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union
import logging

from jose import jwt, JWTError

from noitro.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

def create_session_token(
    subject: Union[str, Any],
    settings: Settings = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    settings = settings or default_settings
    if expires_delta is None:
        expires_delta = timedelta(days=settings.SESSION_TOKEN_EXPIRE_DAYS)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode = {"exp": expire, "sub": str(subject), "typ": "anonymous"}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def verify_session_token(token: str, settings: Settings = None, verify_exp: bool = True) -> Optional[str]:
    """
    Return the identity id a token was issued for, or None when invalid.

    With ``verify_exp=False`` an expired token with a valid signature still
    yields its identity id.
    """
    settings = settings or default_settings
    try:
        # jose rejects expired tokens itself unless told otherwise
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": verify_exp},
        )
    except JWTError as e:
        logger.warning(f"Session token verification error: {e}")
        return None

    identity_id = payload.get("sub")
    if not identity_id:
        logger.warning("Session token payload missing 'sub' field")
        return None
    return identity_id
