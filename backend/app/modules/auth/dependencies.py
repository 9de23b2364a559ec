"""
Authentication dependencies.

This module provides the FastAPI dependency that turns a bearer token into
an ``AuthenticatedUser``. Requests without a valid token are rejected with
401 before any workspace logic runs.
"""
from typing import Optional

from app.core.exceptions import AuthenticationException
from app.core.metrics import record_token_validation
from app.core.security import ACCESS_TOKEN_TYPE, TokenError, decode_token
from app.modules.auth.schemas import AuthenticatedUser, TokenData
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from structlog import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _token_data_from_claims(claims: dict) -> TokenData:
    return TokenData(
        user_id=claims.get("sub"),
        token_type=claims.get("type", ACCESS_TOKEN_TYPE),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> AuthenticatedUser:
    """
    Get the current authenticated user from the bearer token.

    Args:
        credentials: Authorization header parsed by ``HTTPBearer``

    Returns:
        The verified caller identity

    Raises:
        AuthenticationException: If the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        record_token_validation(success=False)
        raise AuthenticationException("Missing or invalid authorization header")

    try:
        token_data = _token_data_from_claims(decode_token(credentials.credentials))
    except TokenError as e:
        logger.info("Token rejected", reason=str(e))
        record_token_validation(success=False)
        raise AuthenticationException(str(e))

    if not token_data.user_id or token_data.token_type != ACCESS_TOKEN_TYPE:
        record_token_validation(success=False)
        raise AuthenticationException("Invalid token")

    record_token_validation(success=True)
    return AuthenticatedUser(user_id=str(token_data.user_id))
