"""
Authentication module.

Resolves the caller's identity from a bearer token issued by the external
identity provider. User accounts themselves live outside this service.
"""

from .schemas import AuthenticatedUser, TokenData

__all__ = [
    "AuthenticatedUser",
    "TokenData",
]
