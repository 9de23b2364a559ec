"""
Membership authorization gate.
"""
from typing import Optional

from app.core.exceptions import UnauthorizedException

from .models import Member, MemberRole


def authorize(member: Optional[Member], required_role: MemberRole) -> bool:
    """Allow only when a membership exists and carries exactly ``required_role``."""
    if member is None:
        return False
    return member.role == required_role


def require_role(member: Optional[Member], required_role: MemberRole) -> Member:
    """
    Enforce ``required_role`` on a membership.

    Raises:
        UnauthorizedException: If the gate denies access
    """
    if not authorize(member, required_role):
        raise UnauthorizedException()
    return member
