"""
Application exceptions and the FastAPI handlers that render them.

Every failure in this service is recoverable: an empty export, a failed call
to the remote shop API or a PDF that could not be rendered is reported back to
the caller, who may simply retry.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from jewel_ledger.core.logger import logger


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NothingToExportError(AppException):
    """Raised when an export window selects no transactions."""

    def __init__(self, message: str = "No transactions in the selected period"):
        super().__init__(
            message=message,
            error_code="ERR_EXPORT_EMPTY",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class PdfRenderError(AppException):
    def __init__(self, message: str = "PDF export failed"):
        super().__init__(
            message=message,
            error_code="ERR_EXPORT_PDF",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class ApiError(AppException):
    """Raised when the remote shop API rejects a call or cannot be reached."""

    def __init__(self, message: str, status_code: int = status.HTTP_502_BAD_GATEWAY, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="ERR_REMOTE_API",
            status_code=status_code,
            details=details,
        )


class SettlementValidationError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="ERR_SETTLEMENT_INVALID",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class TransactionNotFoundError(AppException):
    def __init__(self, transaction_id: str):
        super().__init__(
            message=f"Transaction with ID {transaction_id} not found",
            error_code="ERR_NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"id": transaction_id},
        )


def _error_body(message: str, error_code: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "error_code": error_code,
        "details": details or {},
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.error_code, exc.details),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), f"HTTP_{exc.status_code}"),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal Server Error", "ERR_INTERNAL"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
