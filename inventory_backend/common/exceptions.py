# common/exceptions.py

"""
INVENTORY SERVICE ERRORS

Centralized domain errors shared by the catalog and the stock ledger.

Every error carries a stable `code` so callers (and the HTTP layer) can tell
rejection reasons apart without parsing messages.
"""

from __future__ import annotations


class InventoryServiceError(Exception):
    """Base exception for all inventory service failures."""

    default_code = "INVENTORY_ERROR"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class InvalidArgumentError(InventoryServiceError):
    """Client-fixable input or business-rule violation. Not retryable as-is."""

    default_code = "INVALID_REQUEST"


class NotFoundError(InventoryServiceError):
    """A referenced resource does not exist."""

    default_code = "NOT_FOUND"

    def __init__(self, resource: str, field: str, value):
        super().__init__(f"{resource} not found with {field}: '{value}'")
        self.resource = resource
        self.field = field
        self.value = value


class ConcurrencyConflictError(InventoryServiceError):
    """The row changed since it was read. Retry the whole operation with fresh data."""

    default_code = "CONCURRENCY_CONFLICT"


class DuplicateResourceError(InventoryServiceError):
    """A unique business key is already taken."""

    default_code = "DUPLICATE_RESOURCE"


class StorageError(InventoryServiceError):
    """Infrastructure failure in the storage layer. Nothing was committed."""

    default_code = "STORAGE_ERROR"
