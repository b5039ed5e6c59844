from fastapi import APIRouter, Depends, Request, status

from app.features.seo_analysis.schemas.report import AnalyzeRequest, ErrorBody
from app.features.seo_analysis.services.seo_analyzer import SEOAnalyzerService
from app.platform.response import api_response, error_response

router = APIRouter(prefix="/seo", tags=["seo-analysis"])


def get_seo_analyzer_service() -> SEOAnalyzerService:
    return SEOAnalyzerService()


@router.post(
    "/analyze",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorBody},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorBody},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorBody},
    },
)
async def analyze_page(
    data: AnalyzeRequest,
    request: Request,
    service: SEOAnalyzerService = Depends(get_seo_analyzer_service),
):
    """
    Fetch a single page and return its SEO report.

    Request body: ``{"url": "example.com"}``. The URL is normalized
    (``https://`` is assumed when no scheme is given).

    Failures are returned as ``{"error", "details", "suggestions"}``:
    - 400: malformed URL or unresolvable domain
    - 503: connection refused or no response
    - 500: anything else, including suspected anti-bot blocking
    """
    if not data.url or not data.url.strip():
        return error_response(
            error="URL is required",
            details="Please provide a valid URL in the request body",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    request_id = getattr(request.state, "request_id", None)
    report = await service.analyze(data.url, request_id=request_id)

    return api_response(data=report, message="Analysis complete")
