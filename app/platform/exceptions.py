from typing import List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.platform.logger import get_logger
from app.platform.response import error_response

logger = get_logger(__name__)

RETRIEVAL_SUGGESTIONS = [
    "Check if the URL is correct and accessible",
    "Try analyzing the website later",
    "Make sure the website is not blocking automated requests",
    "If the issue persists, try analyzing a different URL",
]


class SEOAnalysisError(Exception):
    """Base class for every failure surfaced by the analysis pipeline."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        details: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.suggestions = suggestions


class InvalidURL(SEOAnalysisError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, url: str, reason: Optional[str] = None):
        super().__init__(
            f"Invalid URL: {url}",
            details=reason,
            suggestions=["Check that the URL is spelled correctly, e.g. https://example.com"],
        )
        self.url = url


class NetworkError(SEOAnalysisError):
    """
    Static fetch failure.

    ``kind`` is one of: connection_refused, host_not_found, http_status,
    no_response, timeout, too_many_redirects, request_error.
    """

    def __init__(
        self,
        message: str,
        kind: str,
        *,
        http_status: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.http_status = http_status
        self.reason = reason


class RenderError(SEOAnalysisError):
    """Headless browser launch or navigation failure."""


class ContentRetrievalError(SEOAnalysisError):
    """Both the static fetch and the rendered fetch failed."""

    def __init__(
        self,
        url: str,
        failed_stage: str,
        static_error: Optional[NetworkError] = None,
        render_error: Optional[RenderError] = None,
    ):
        static_message = static_error.message if static_error else "not attempted"
        message = (
            f"Failed to analyze {url} using browser simulation after the static fetch "
            f"failed ({static_message}). The website might be blocking automated "
            f"requests or have strong anti-bot measures."
        )
        details = None
        if render_error is not None:
            details = f"{failed_stage}: {render_error.message}"
        super().__init__(message, details=details, suggestions=list(RETRIEVAL_SUGGESTIONS))
        self.url = url
        self.failed_stage = failed_stage
        self.static_error = static_error
        self.render_error = render_error
        self.status_code = self._status_for(static_error)

    @staticmethod
    def _status_for(static_error: Optional[NetworkError]) -> int:
        if static_error is None:
            return status.HTTP_500_INTERNAL_SERVER_ERROR
        if static_error.kind == "host_not_found":
            return status.HTTP_400_BAD_REQUEST
        if static_error.kind in ("connection_refused", "no_response", "timeout"):
            return status.HTTP_503_SERVICE_UNAVAILABLE
        return status.HTTP_500_INTERNAL_SERVER_ERROR


class UnknownError(SEOAnalysisError):
    def __init__(self, message: str = "An unknown error occurred", details: Optional[str] = None):
        super().__init__(message, details=details)


def add_exception_handlers(app):
    @app.exception_handler(SEOAnalysisError)
    async def seo_analysis_exception_handler(request: Request, exc: SEOAnalysisError):
        return error_response(
            error=exc.message,
            details=exc.details,
            suggestions=exc.suggestions,
            status_code=exc.status_code,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(
            error=str(exc.detail) or "Error",
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(
            error="Validation failed",
            details=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        unknown = UnknownError(details=str(exc))
        return error_response(
            error=unknown.message,
            details=unknown.details,
            status_code=unknown.status_code,
        )
