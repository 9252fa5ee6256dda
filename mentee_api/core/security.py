"""
Bearer-token identity.

The identity provider issues signed JWTs; the API only verifies them and
turns the claims into an Identity value that is passed explicitly into the
service layer.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ..models.domain import Identity
from .config import settings
from .errors import AuthenticationError
from .logging import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(
    identity: Identity,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issue a signed token for an identity.

    Used by development tooling and tests; production tokens come from the
    identity provider with the same claims.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": identity.uid,
        "email": identity.email,
        "name": identity.name,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_identity(token: str) -> Identity:
    """
    Verify a token and extract the identity.

    Raises:
        AuthenticationError: If the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning("Rejected token", extra_data={"error": str(e)})
        raise AuthenticationError("Could not validate credentials") from e

    uid = payload.get("sub")
    if not uid:
        raise AuthenticationError("Could not validate credentials")

    return Identity(
        uid=uid,
        email=payload.get("email") or "",
        name=payload.get("name") or "",
    )


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Identity:
    """FastAPI dependency resolving the caller's identity"""
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    return decode_identity(credentials.credentials)
