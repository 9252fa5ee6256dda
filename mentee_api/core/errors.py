"""
Application exceptions and error handling.

Every failure leaves the API as ``{"error": {"type", "message", "details"?}}``.
Answer validation outcomes are not errors: a wrong, blank or unparseable
answer comes back as an ordinary result from the grading service.
"""

from typing import Any, Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .logging import get_logger

logger = get_logger(__name__)


# Custom Exceptions

class MenteeError(Exception):
    """Base exception for portal errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class QuestionNotFoundError(MenteeError):
    """No question document with this id"""

    def __init__(self, question_id: str):
        super().__init__(
            f"Question '{question_id}' not found",
            status.HTTP_404_NOT_FOUND,
            {"question_id": question_id}
        )


class UserNotFoundError(MenteeError):
    """No user profile with this uid"""

    def __init__(self, user_id: str):
        super().__init__(
            f"User '{user_id}' not found",
            status.HTTP_404_NOT_FOUND,
            {"user_id": user_id}
        )


class SubmissionRejectedError(MenteeError):
    """The question exists but takes no answers (inactive, or not a maths type)"""

    def __init__(self, question_id: str, reason: str):
        super().__init__(
            f"Cannot submit an answer for '{question_id}': {reason}",
            status.HTTP_409_CONFLICT,
            {"question_id": question_id, "reason": reason}
        )


class GradingError(MenteeError):
    """Stored content can no longer be resolved to its variant"""

    def __init__(self, question_id: str, error: str):
        super().__init__(
            f"Failed to grade answer for '{question_id}': {error}",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"question_id": question_id, "error": error}
        )


class ValidationError(MenteeError):
    """Request data the models accepted but the domain does not"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            {"field": field} if field else None
        )


class AuthenticationError(MenteeError):
    """Missing, invalid or expired bearer token"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class AuthorizationError(MenteeError):
    """Caller is not in the admins collection"""

    def __init__(self, message: str = "Unauthorized. Admin access required."):
        super().__init__(message, status.HTTP_403_FORBIDDEN)


# Response bodies

def error_body(
    error_type: str,
    message: Any,
    details: Optional[Any] = None
) -> Dict[str, Any]:
    """Standard error envelope"""
    body: Dict[str, Any] = {"type": error_type, "message": message}
    if details:
        body["details"] = details
    return {"error": body}


def field_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic errors to ``{"field", "message", "type"}`` entries.

    ``field`` joins the error location with dots (``body.subjectId``).
    """
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in errors
    ]


# Exception Handlers

async def mentee_error_handler(request: Request, exc: MenteeError) -> JSONResponse:
    """Portal errors carry their own status and details"""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        exc.message,
        extra_data={
            "error_type": type(exc).__name__,
            "status_code": exc.status_code,
            "path": request.url.path,
            **exc.details
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(type(exc).__name__, exc.message, exc.details)
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes, wrong methods and framework-raised HTTP errors"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body("HTTPException", exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies, paths and query parameters"""
    details = field_errors(exc.errors())

    logger.warning(
        "Request validation failed",
        extra_data={"path": request.url.path, "errors": details}
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("ValidationError", "Request validation failed", details)
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected; the message is only exposed in debug mode"""
    logger.exception(
        "Unexpected error occurred",
        extra_data={"path": request.url.path}
    )

    message = str(exc) if settings.DEBUG else "An internal error occurred"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("InternalServerError", message)
    )


def register_error_handlers(app) -> None:
    """Register error handlers with FastAPI app"""
    app.add_exception_handler(MenteeError, mentee_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
