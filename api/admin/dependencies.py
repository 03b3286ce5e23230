"""
Admin dependency for protected FastAPI routes.

The caller identifies itself with the X-User-Email header; the address must be
on the ADMIN_EMAILS allowlist (compared case-insensitively).
"""

from __future__ import annotations

import logging

from fastapi import Header, status

from core import settings
from core.responses import api_error

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def is_admin_email(email: str, allowlist: list[str]) -> bool:
    candidate = normalize_email(email)
    return bool(candidate) and any(candidate == normalize_email(item) for item in allowlist)


def _check_admin_email(x_user_email: str | None) -> str:
    email = (x_user_email or "").strip()
    if not email:
        raise api_error(
            status.HTTP_401_UNAUTHORIZED,
            "Missing user email",
            "Admin access requires authentication",
        )

    if not is_admin_email(email, settings.admin_emails()):
        logger.warning("admin_denied email=%s", email)
        raise api_error(
            status.HTTP_403_FORBIDDEN,
            "Access denied",
            "Admin access required",
        )
    return email


async def require_admin(x_user_email: str | None = Header(default=None)) -> str:
    """
    Returns the caller's email when it is on the admin allowlist.
    """
    return _check_admin_email(x_user_email)
