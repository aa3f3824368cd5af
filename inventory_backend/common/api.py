# common/api.py

"""
DRF EXCEPTION HANDLER

Maps domain errors (common.exceptions) onto HTTP responses.

Body shape for domain errors:
    {"detail": "<message>", "code": "<CODE>"}

Anything that is not a domain error goes through DRF's default handler.
"""

from __future__ import annotations

import logging

from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from common.exceptions import (
    ConcurrencyConflictError,
    DuplicateResourceError,
    InvalidArgumentError,
    InventoryServiceError,
    NotFoundError,
    StorageError,
)
from common.sanitize import sanitize_for_log

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConcurrencyConflictError, status.HTTP_409_CONFLICT),
    (DuplicateResourceError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def _status_for(exc: InventoryServiceError) -> int:
    for error_class, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def inventory_exception_handler(exc, context):
    if isinstance(exc, InventoryServiceError):
        http_status = _status_for(exc)
        if http_status >= 500:
            logger.error(
                "Inventory service failure",
                extra={"code": exc.code, "error": sanitize_for_log(exc.message)},
            )
        else:
            logger.warning(
                "Request rejected",
                extra={"code": exc.code, "error": sanitize_for_log(exc.message)},
            )
        return Response({"detail": exc.message, "code": exc.code}, status=http_status)

    if isinstance(exc, ProtectedError):
        logger.warning("Delete blocked by protected references")
        return Response(
            {
                "detail": "Resource is referenced by other records and cannot be deleted.",
                "code": "RESOURCE_IN_USE",
            },
            status=status.HTTP_409_CONFLICT,
        )

    return exception_handler(exc, context)
