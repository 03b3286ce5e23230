"""
Admin-only overview endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from clients import router as clients_router
from clients.repository import ClientRepository
from core.errors import StorageError
from core.responses import api_error, ok
from tutors import router as tutors_router
from tutors.repository import TutorRepository

from . import dependencies

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin")


@router.get("/stats")
async def get_admin_stats(
    admin_email: str = Depends(dependencies.require_admin),
    tutors: TutorRepository = Depends(tutors_router.get_repository),
    clients: ClientRepository = Depends(clients_router.get_repository),
) -> dict:
    try:
        tutors_count = await tutors.count()
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to get tutors count") from exc

    try:
        clients_count = await clients.count()
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to get clients count") from exc

    logger.info("admin_stats by=%s", admin_email)
    stats = {
        "tutors_count": tutors_count,
        "clients_count": clients_count,
        "total_users": tutors_count + clients_count,
    }
    return ok(stats, "Admin stats retrieved successfully")
