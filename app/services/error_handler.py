"""
Error rendering for the exception handlers and middleware.
Every failure becomes a {success: false, message, data?} envelope with a matching status code.
"""

from typing import Dict, Any, Optional, List, Union
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from app.schemas.envelope import FieldError, error_response
from app.utils.exceptions import APIException
import logging
import uuid

logger = logging.getLogger(__name__)


class ErrorHandlerService:
    """
    Turns exceptions into envelope responses.

    Client errors are logged as warnings and server errors as errors, each
    tagged with the request id assigned by the request logging middleware.
    Driver and interpreter details never reach the response body.
    """

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Render an application exception with its own status, message and data.

        Args:
            exception: Raised API exception
            request: Request being served, when there is one
        """
        request_id, extra = ErrorHandlerService._log_context(request)
        extra.update(error_code=exception.error_code, status_code=exception.status_code)

        log = logger.error if exception.status_code >= 500 else logger.warning
        log(f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}", extra=extra)

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response(str(exception.detail), exception.data),
            headers=exception.headers
        )

    @staticmethod
    def handle_validation_error(
        exception: Union[RequestValidationError, PydanticValidationError],
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Render schema validation failures as 422 with one entry per field under data.errors."""
        request_id, extra = ErrorHandlerService._log_context(request)

        field_errors: List[Dict[str, Any]] = []
        for error in exception.errors():
            field_path = ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query"))
            field_errors.append(FieldError(
                field=field_path or None,
                message=error["msg"],
                type=error["type"],
            ).model_dump())

        extra.update(error_count=len(field_errors))
        logger.warning(f"Validation Error [{request_id}]: {len(field_errors)} field errors", extra=extra)

        return JSONResponse(
            status_code=422,
            content=error_response("Request validation failed", {"errors": field_errors})
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Render a database error that no service translated; constraint violations map to 409."""
        request_id, extra = ErrorHandlerService._log_context(request)
        logger.error(
            f"Database Error [{request_id}]: {type(exception).__name__} - {exception}",
            extra=extra,
            exc_info=True
        )

        if isinstance(exception, IntegrityError):
            return JSONResponse(status_code=409, content=error_response("Data integrity constraint violation"))
        return JSONResponse(status_code=500, content=error_response("Database operation failed"))

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        # Routing errors such as unknown paths and disallowed methods
        request_id, extra = ErrorHandlerService._log_context(request)
        extra.update(status_code=exception.status_code)
        logger.warning(f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}", extra=extra)

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response(str(exception.detail)),
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Log the traceback and answer with a generic 500."""
        request_id, extra = ErrorHandlerService._log_context(request)
        extra.update(exception_type=type(exception).__name__)
        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {exception}",
            extra=extra,
            exc_info=True
        )

        return JSONResponse(status_code=500, content=error_response("Internal server error"))

    @staticmethod
    def _log_context(request: Optional[Request]):
        """Request id plus the ``extra`` mapping attached to every error log line."""
        request_id = getattr(request.state, "request_id", None) if request is not None else None
        request_id = request_id or str(uuid.uuid4())[:8]
        return request_id, {
            "request_id": request_id,
            "path": request.url.path if request is not None else None,
        }
