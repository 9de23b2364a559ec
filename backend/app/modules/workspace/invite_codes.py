"""
Invite code generation.
"""
import secrets
import string

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_invite_code(length: int) -> str:
    """
    Generate a random invite code.

    Each character is drawn independently and uniformly from
    ``INVITE_CODE_ALPHABET``. Uniqueness across workspaces is not checked;
    62**6 codes make collisions negligible at the default length.

    Args:
        length: Number of characters

    Returns:
        The invite code
    """
    if length < 0:
        raise ValueError("Invite code length cannot be negative")

    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))
