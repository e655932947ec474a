"""Error taxonomy and FastAPI handlers that render errors as `{"error", "details"}` JSON."""

import logging
from typing import Any, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class FilesApiError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str, details: Optional[Any] = None):
        super().__init__(error)
        self.error = error
        self.details = details

    def to_content(self) -> dict:
        content = {"error": self.error}
        if self.details is not None:
            content["details"] = self.details
        return content


class ValidationError(FilesApiError):
    """A required field is missing or blank."""

    status_code = status.HTTP_400_BAD_REQUEST


class ProviderError(FilesApiError):
    """The Drive or Blob SDK failed."""

    @classmethod
    def from_exception(cls, error: str, exc: Exception) -> "ProviderError":
        """Wrap an SDK exception, keeping its text as `details`."""
        return cls(error, str(exc) or exc.__class__.__name__)


class PartialBatchFailure(FilesApiError):
    """One object of a multi-file download could not be fetched."""

    def __init__(self, file_name: str, details: Optional[Any] = None):
        super().__init__(f"Failed to download file: {file_name}", details)
        self.file_name = file_name


async def handle_files_api_errors(request: Request, exc: FilesApiError) -> JSONResponse:
    """Render a `FilesApiError` with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error} ({exc.details})")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.error}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies or wrongly typed fields never reach the route."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "Invalid request", "details": errors},
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of the route handlers."""
    try:
        return await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
