"""API error handling

Use case errors are raised as ClientError and rendered as
{"error": {"code", "message", "reason"}}.
"""

import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"RECEIVABLE_NOT_FOUND", "CUSTOMER_NOT_FOUND"}
CONFLICT_CODES = {"EDIT_LOCKED", "PURGE_REQUIRES_REFUND", "OVERPAYMENT_REJECTED"}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


def status_for(error: Error) -> int:
    """HTTP status for a use case error code"""
    if error.code in NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    if error.code == "INSUFFICIENT_CREDIT":
        return status.HTTP_402_PAYMENT_REQUIRED
    if error.code in CONFLICT_CODES:
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def raise_for_error(error: Error):
    raise ClientError(error, status_code=status_for(error))


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.error.code.endswith("_FAILED"):
        logger.error(f"{request.method} {request.url.path} failed: {exc.error.code} {exc.error.reason}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error.to_dict()})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', []))}: {err.get('msg')}"
        for err in exc.errors()
    )
    error = Error(code="VALIDATION_ERROR", message="Invalid request parameters", reason=details)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": error.to_dict()})
