"""
Caller identity.

Credentials are checked by the credential service in front of this app,
which forwards the authenticated user's id in the ``X-User-Id`` header.
"""
import logging
from typing import Optional

from fastapi import Header

logger = logging.getLogger(__name__)


def parse_user_id(raw: Optional[str]) -> Optional[int]:
    """Positive integer id, or None when the header is missing or invalid."""
    if raw is None:
        return None
    try:
        user_id = int(raw.strip())
    except ValueError:
        logger.warning(f"Invalid X-User-Id header: {raw!r}")
        return None
    return user_id if user_id > 0 else None


async def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> Optional[int]:
    """Dependency; ResolutionOrchestrator answers Unauthorized for None."""
    return parse_user_id(x_user_id)
