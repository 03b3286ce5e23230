"""
Client API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from admin import dependencies as admin_dependencies
from core import db
from core.errors import NotFoundError, StorageError
from core.responses import api_error, ok

from .repository import ClientRepository
from .schemas import ClientIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/clients")
admin_router = APIRouter(prefix="/api/admin/clients")


def get_repository(database: db.Database | None = Depends(db.get_database)) -> ClientRepository:
    return ClientRepository(database)


@router.get("")
async def list_clients(repository: ClientRepository = Depends(get_repository)) -> dict:
    try:
        clients = await repository.list()
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to retrieve clients") from exc
    return ok(clients, "Clients retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientIn,
    repository: ClientRepository = Depends(get_repository),
) -> dict:
    try:
        client = await repository.create(payload)
    except StorageError as exc:
        logger.error("client_create_failed error=%s", exc)
        raise api_error(500, str(exc), "Failed to create client") from exc
    return ok(client, "Client profile created successfully")


@router.get("/by-email/{email:path}")
async def get_client_by_email(
    email: str,
    repository: ClientRepository = Depends(get_repository),
) -> dict:
    try:
        client = await repository.get_by_email(email)
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to retrieve client") from exc
    if client is None:
        return ok(None, "No client found with this email")
    return ok(client, "Client retrieved successfully")


@admin_router.put("/{client_id}")
async def update_client(
    client_id: int,
    payload: ClientIn,
    admin_email: str = Depends(admin_dependencies.require_admin),
    repository: ClientRepository = Depends(get_repository),
) -> dict:
    try:
        client = await repository.update(client_id, payload)
    except NotFoundError as exc:
        raise api_error(404, "Client not found", "No client found with the given ID") from exc
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to update client") from exc
    logger.info("admin_client_update id=%s by=%s", client_id, admin_email)
    return ok(client, "Client updated successfully")


@admin_router.delete("/{client_id}")
async def delete_client(
    client_id: int,
    admin_email: str = Depends(admin_dependencies.require_admin),
    repository: ClientRepository = Depends(get_repository),
) -> dict:
    try:
        await repository.delete(client_id)
    except NotFoundError as exc:
        raise api_error(404, "Client not found", "No client found with the given ID") from exc
    except StorageError as exc:
        raise api_error(500, str(exc), "Failed to delete client") from exc
    logger.info("admin_client_delete id=%s by=%s", client_id, admin_email)
    return ok(None, "Client deleted successfully")
