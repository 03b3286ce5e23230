"""
Tutor API endpoints.

Public routes live on `router`; admin-only mutations on `admin_router`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from admin import dependencies as admin_dependencies
from core import db
from core.errors import NotFoundError, StorageError
from core.responses import api_error, ok

from .repository import TutorRepository
from .schemas import TutorIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tutors")
admin_router = APIRouter(prefix="/api/admin/tutors")


def get_repository(database: db.Database | None = Depends(db.get_database)) -> TutorRepository:
    return TutorRepository(database)


@router.get("")
async def list_tutors(repository: TutorRepository = Depends(get_repository)) -> dict:
    try:
        tutors = await repository.list()
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to retrieve tutors") from exc
    return ok(tutors, "Tutors retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tutor(
    payload: TutorIn,
    repository: TutorRepository = Depends(get_repository),
) -> dict:
    try:
        tutor = await repository.create(payload)
    except StorageError as exc:
        logger.error("tutor_create_failed error=%s", exc)
        raise api_error(500, str(exc), "Failed to create tutor") from exc
    return ok(tutor, "Tutor profile created successfully")


@router.get("/by-email/{email:path}")
async def get_tutor_by_email(
    email: str,
    repository: TutorRepository = Depends(get_repository),
) -> dict:
    """
    No match is a success with null data, unlike the id-keyed admin routes.
    """
    try:
        tutor = await repository.get_by_email(email)
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to retrieve tutor") from exc
    if tutor is None:
        return ok(None, "No tutor found with this email")
    return ok(tutor, "Tutor retrieved successfully")


@admin_router.put("/{tutor_id}")
async def update_tutor(
    tutor_id: int,
    payload: TutorIn,
    admin_email: str = Depends(admin_dependencies.require_admin),
    repository: TutorRepository = Depends(get_repository),
) -> dict:
    try:
        tutor = await repository.update(tutor_id, payload)
    except NotFoundError as exc:
        raise api_error(404, "Tutor not found", "No tutor found with the given ID") from exc
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to update tutor") from exc
    logger.info("admin_tutor_update id=%s by=%s", tutor_id, admin_email)
    return ok(tutor, "Tutor updated successfully")


@admin_router.delete("/{tutor_id}")
async def delete_tutor(
    tutor_id: int,
    admin_email: str = Depends(admin_dependencies.require_admin),
    repository: TutorRepository = Depends(get_repository),
) -> dict:
    try:
        await repository.delete(tutor_id)
    except NotFoundError as exc:
        raise api_error(404, "Tutor not found", "No tutor found with the given ID") from exc
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to delete tutor") from exc
    logger.info("admin_tutor_delete id=%s by=%s", tutor_id, admin_email)
    return ok(None, "Tutor deleted successfully")
