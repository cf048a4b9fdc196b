"""Global exception handlers.

- ServiceFailureError → status from the result kind, {"detail", "status", "kind"}
- RequestValidationError → 400 with field-level details
- PyMongoError → 503, store unavailable
- Exception (catch-all) → 500 without internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from api.results import ServiceFailureError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(ServiceFailureError)
    async def service_failure_handler(request: Request, exc: ServiceFailureError):
        logger.info("Operation refused", extra={
            "path": request.url.path,
            "kind": exc.failure.kind.value,
            "detail": exc.failure.message,
        })
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error", extra={"path": request.url.path, "errorCount": len(exc.errors())})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Invalid request data",
                "status": status.HTTP_400_BAD_REQUEST,
                "kind": "validation_failure",
                "errors": [
                    {
                        "field": ".".join(str(loc) for loc in e["loc"]),
                        "message": e["msg"],
                        "type": e["type"],
                    }
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(PyMongoError)
    async def store_error_handler(request: Request, exc: PyMongoError):
        logger.error("Store failure", extra={"path": request.url.path, "error": str(exc)[:200]})
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Database unavailable", "status": status.HTTP_503_SERVICE_UNAVAILABLE},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred", "status": status.HTTP_500_INTERNAL_SERVER_ERROR},
        )
