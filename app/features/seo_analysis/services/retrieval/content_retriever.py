import asyncio
from dataclasses import dataclass
from typing import Optional

from app.features.seo_analysis.schemas.report import FetchMethod
from app.features.seo_analysis.services.retrieval.browser_renderer import BrowserRenderer
from app.features.seo_analysis.services.retrieval.static_fetcher import (
    StaticFetcher,
    default_headers,
)
from app.platform.config import settings
from app.platform.exceptions import ContentRetrievalError, NetworkError, RenderError
from app.platform.logger import StageLogger, get_logger

logger = get_logger(__name__)

STAGE_STATIC = "fetch-static"
STAGE_RENDERED = "fetch-rendered"


@dataclass(frozen=True)
class StageOutcome:
    """Result of one fetch stage: either html or the error that ended it."""
    html: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.html is not None


@dataclass(frozen=True)
class RetrievalResult:
    html: Optional[str] = None
    method: Optional[FetchMethod] = None
    failed_stage: Optional[str] = None
    static_error: Optional[NetworkError] = None
    render_error: Optional[RenderError] = None

    @property
    def ok(self) -> bool:
        return self.method is not None

    def to_error(self, url: str) -> ContentRetrievalError:
        return ContentRetrievalError(
            url,
            self.failed_stage or STAGE_RENDERED,
            static_error=self.static_error,
            render_error=self.render_error,
        )


class ContentRetriever:
    """
    Two-stage retrieval: static fetch, then a rendered fetch only if the
    static fetch failed. Neither stage retries.
    """

    def __init__(
        self,
        static_fetcher: Optional[StaticFetcher] = None,
        renderer: Optional[BrowserRenderer] = None,
        user_agent: Optional[str] = None,
    ):
        self.static_fetcher = static_fetcher or StaticFetcher()
        self.renderer = renderer or BrowserRenderer()
        self.user_agent = user_agent or settings.USER_AGENT

    async def fetch_static(self, url: str) -> StageOutcome:
        try:
            html = await self.static_fetcher.fetch(
                url,
                headers=default_headers(self.user_agent),
                timeout=settings.STATIC_FETCH_TIMEOUT,
                max_redirects=settings.STATIC_FETCH_MAX_REDIRECTS,
            )
        except NetworkError as e:
            return StageOutcome(error=e)
        except Exception as e:
            logger.exception(f"Unexpected static fetch failure for {url}")
            return StageOutcome(error=NetworkError(f"Static fetch failed: {e}", "request_error"))
        return StageOutcome(html=html)

    async def fetch_rendered(self, url: str) -> StageOutcome:
        try:
            html = await asyncio.to_thread(
                self.renderer.render,
                url,
                self.user_agent,
                settings.RENDER_NAVIGATION_TIMEOUT,
            )
        except RenderError as e:
            return StageOutcome(error=e)
        except Exception as e:
            logger.exception(f"Unexpected render failure for {url}")
            return StageOutcome(error=RenderError(f"Browser rendering failed for {url}: {e}"))
        return StageOutcome(html=html)

    async def retrieve(self, url: str, stage_logger: Optional[StageLogger] = None) -> RetrievalResult:
        stages = stage_logger or StageLogger("-", logger=logger)

        stages.started(STAGE_STATIC)
        static = await self.fetch_static(url)
        if static.ok:
            stages.success(STAGE_STATIC)
            stages.skipped(STAGE_RENDERED, "static fetch succeeded")
            return RetrievalResult(html=static.html, method=FetchMethod.STATIC)

        static_error = static.error
        stages.failure(STAGE_STATIC, str(static_error))

        stages.started(STAGE_RENDERED)
        rendered = await self.fetch_rendered(url)
        if rendered.ok:
            stages.success(STAGE_RENDERED)
            return RetrievalResult(
                html=rendered.html, method=FetchMethod.RENDERED, static_error=static_error
            )

        stages.failure(STAGE_RENDERED, str(rendered.error))
        return RetrievalResult(
            failed_stage=STAGE_RENDERED,
            static_error=static_error,
            render_error=rendered.error,
        )
