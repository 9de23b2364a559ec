"""
Bearer token verification with PyJWT.

Tokens are issued by the external identity provider and share its signing
key. Only ``decode_token`` is used when serving requests;
``create_access_token`` mints tokens for tests and local tooling.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from app.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


class TokenError(Exception):
    """A bearer token could not be verified."""


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an access token for the claims in ``data``.

    ``sub`` is the user identity. ``iat``, ``exp`` and ``type`` are added;
    the lifetime defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``.
    """
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=settings.access_token_expire_minutes)

    claims = {**data, "iat": issued_at, "exp": issued_at + lifetime, "type": ACCESS_TOKEN_TYPE}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        TokenError: If the token is expired, malformed or badly signed
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenError("Invalid token") from e
