import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from gold.exceptions import (
    AlreadyExists,
    GoldLedgerError,
    ImmutableRecordError,
    InvalidGoldQuantity,
    InvalidPayment,
    NotFound,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InvalidGoldQuantity, status.HTTP_400_BAD_REQUEST),
    (InvalidPayment, status.HTTP_400_BAD_REQUEST),
    (AlreadyExists, status.HTTP_409_CONFLICT),
    (ImmutableRecordError, status.HTTP_409_CONFLICT),
)


def gold_exception_handler(exc, context):
    """
    Render ledger failures as ``{"timestamp", "kind", "message"}``.

    Anything that is not a GoldLedgerError falls through to DRF's default
    handler.
    """
    if not isinstance(exc, GoldLedgerError):
        return exception_handler(exc, context)

    http_status = status.HTTP_400_BAD_REQUEST
    for error_class, error_status in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            http_status = error_status
            break

    view = context.get("view")
    logger.info(
        "Ledger request rejected: view=%s kind=%s status=%d message=%s",
        type(view).__name__ if view else None,
        exc.kind,
        http_status,
        exc.message,
    )
    return Response(exc.as_dict(), status=http_status)
