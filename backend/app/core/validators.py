"""
Field validators shared by the workspace request schemas, so multipart form
input and JSON input are checked the same way.
"""

import re
from typing import Optional

WORKSPACE_NAME_MAX_LENGTH = 255


class ValidationPatterns:
    # Image URL kept on a workspace: base64 image data URI or http(s) URL
    IMAGE_URL = re.compile(r'^(data:image/[a-zA-Z0-9.+-]+;base64,|https?://)')


class CommonValidators:

    @staticmethod
    def validate_workspace_name(v: str) -> str:
        """Names are non-blank, at most 255 characters and not padded with whitespace."""
        if not v or not v.strip():
            raise ValueError('Name is required')
        if len(v) > WORKSPACE_NAME_MAX_LENGTH:
            raise ValueError(f'Name cannot exceed {WORKSPACE_NAME_MAX_LENGTH} characters')
        if v != v.strip():
            raise ValueError('Name cannot have leading or trailing whitespace')
        return v

    @staticmethod
    def validate_invite_code(v: str) -> str:
        # Compared verbatim against the stored code, so no trimming or case folding
        if not v:
            raise ValueError('Invite code is required')
        return v

    @staticmethod
    def normalize_image_url(v: Optional[str]) -> Optional[str]:
        """An empty string means "no image"; other values must be image URLs."""
        if not v:
            return None
        if not ValidationPatterns.IMAGE_URL.match(v):
            raise ValueError('Image URL must be a data URI or an http(s) URL')
        return v
