"""
Authentication dependencies for FastAPI routes.

Accepts the token from either:
- `Authorization: Bearer <token>` (API clients)
- `x-auth-token: <token>` (the web frontend)
"""

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.db import get_db
from core.logging import get_logger
from core.models import User

from ..schemas import parse_row_id
from .jwt import decode_access_token

logger = get_logger("auth")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def get_token_from_request(
    token_header: str | None = Depends(oauth2_scheme),
    x_auth_token: str | None = Header(None, alias="x-auth-token"),
) -> str:
    """Extract the token, preferring the Authorization header."""
    token = token_header or x_auth_token
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token, authorization denied",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def get_current_user(
    token: str = Depends(get_token_from_request),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user.

    1) Decode the JWT, 401 if it does not verify.
    2) Parse the `sub` claim as a user id, 400 if malformed.
    3) Load the user, 401 if it no longer exists.
    """
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is not valid",
        ) from None

    user_id = parse_row_id(payload.get("sub"))
    if user_id is None:
        logger.warning("malformed_token_subject", subject=payload.get("sub"))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Profile not found",
        )

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is not valid",
        )
    return user
