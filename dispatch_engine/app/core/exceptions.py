"""
Custom exceptions and error handlers for consistent error responses.

Every authorization failure raised by the engine is an AppException carrying
an HTTP-style status code, so the boundary layer (HTTP handler, queue
consumer) can surface the message without re-deriving context.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict

from dispatch_engine.app.core.logging import get_logger

logger = get_logger("errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class InvalidOperationError(AppException):
    """Raised when a request is self-contradictory, e.g. an agency dispatching to itself."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_BAD_REQUEST_001",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class InsufficientPermissionsError(AppException):
    """Raised when the hierarchy, the dispatch status or the actor forbids an action."""

    def __init__(self, message: str = "Insufficient permissions", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class ResourceConflictError(AppException):
    """Raised when a record is already claimed, e.g. a parcel travelling in another dispatch."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_CONFLICT_001",
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )


class HierarchyIntegrityError(AppException):
    """Raised when the agency parent links do not form a forest (cycle or runaway depth)."""

    def __init__(self, agency_id: int, message: str = None):
        super().__init__(
            message=message or f"Agency hierarchy around agency {agency_id} is corrupted",
            error_code="ERR_HIERARCHY_001",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"agency_id": agency_id}
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception: %s", type(exc).__name__)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the engine's error rendering on a host FastAPI application.

    Usage:
        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
