"""
Storage-layer error taxonomy.

Request validation errors are not listed here; FastAPI raises
`RequestValidationError` before any of this code runs.
"""

from __future__ import annotations


class StorageLayerError(RuntimeError):
    pass


class ConfigError(StorageLayerError):
    """Missing or unusable database configuration. Fatal at startup."""


class SchemaError(StorageLayerError):
    """A base table could not be created. Fatal at startup."""


class StorageError(StorageLayerError):
    """A query or statement failed."""


class NotFoundError(StorageLayerError):
    """No row matched an id-keyed lookup or mutation."""

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} {entity_id} not found.")
        self.entity = entity
        self.entity_id = entity_id
