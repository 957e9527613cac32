"""
Exception hierarchy and the global handlers that render it.

Every failure leaves the API in the same envelope:

    {"success": false, "message": "...", "error": "...", "errors": [...]}

    CatalogError (base)
    ├── ValidationError         → 400 "Validation error", per-field errors
    ├── InvalidParametersError  → 400 "Invalid parameters"
    ├── NotFoundError           → 404 "Product not found"
    └── UnexpectedError         → 500 store or runtime failure
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_catalog.schemas.product import ErrorResponse, FieldError

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base exception for errors reported to API clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        error: Optional[str] = None,
        errors: Optional[List[FieldError]] = None,
    ):
        self.message = message or self.default_message
        self.error = error
        self.errors = errors
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(message=self.message, error=self.error, errors=self.errors)


class ValidationError(CatalogError):
    """Raised when a request body fails its rule set."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class InvalidParametersError(CatalogError):
    """Raised when a path parameter is malformed."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid parameters"


class NotFoundError(CatalogError):
    """Raised when an operation targets an identifier with no record."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Product not found"


class UnexpectedError(CatalogError):
    """Raised when the store or the runtime fails."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def field_errors(issues: Iterable[Dict[str, Any]]) -> List[FieldError]:
    """
    Convert pydantic/FastAPI error dicts into (field, message) pairs.

    The leading location segment ("body", "path", ...) is dropped, so a
    body issue at ("body", "price") is reported for field "price".
    """
    result = []
    for issue in issues:
        loc = [str(part) for part in issue.get("loc", ())]
        field = ".".join(loc[1:]) or (loc[0] if loc else "")
        result.append(FieldError(field=field, message=issue.get("msg", "Invalid value")))
    return result


def from_request_validation(exc: RequestValidationError) -> CatalogError:
    """
    Map a framework validation failure onto the catalog error types.

    A malformed path parameter wins over any body issue, so a bad identifier
    is always reported as "Invalid parameters".
    """
    issues = list(exc.errors())
    path_issues = [issue for issue in issues if (issue.get("loc") or ("",))[0] == "path"]
    if path_issues:
        detail = "; ".join(f"{e.field}: {e.message}" for e in field_errors(path_issues))
        return InvalidParametersError(error=detail)
    return ValidationError(errors=field_errors(issues))


def render(exc: CatalogError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True),
    )


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.error})")
    return render(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = from_request_validation(exc)
    logger.info(f"{request.method} {request.url.path} rejected: {error.message}")
    return render(error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, wrong method) in the envelope."""
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
