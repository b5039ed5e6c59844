from unittest.mock import AsyncMock, MagicMock

import pytest

from app.features.seo_analysis.schemas.report import FetchMethod
from app.features.seo_analysis.services.retrieval.content_retriever import ContentRetriever
from app.platform.exceptions import NetworkError, RenderError
from app.platform.logger import StageLogger

URL = "https://example.com/"


def make_retriever(static_result=None, static_error=None, render_result=None, render_error=None):
    static_fetcher = MagicMock()
    static_fetcher.fetch = AsyncMock(return_value=static_result, side_effect=static_error)
    renderer = MagicMock()
    renderer.render = MagicMock(return_value=render_result, side_effect=render_error)
    return ContentRetriever(static_fetcher=static_fetcher, renderer=renderer), static_fetcher, renderer


class TestContentRetriever:
    @pytest.mark.asyncio
    async def test_static_success_never_renders(self):
        retriever, static_fetcher, renderer = make_retriever(static_result="<html>static</html>")
        stages = StageLogger("req-1")

        result = await retriever.retrieve(URL, stage_logger=stages)

        assert result.ok
        assert result.html == "<html>static</html>"
        assert result.method == FetchMethod.STATIC
        static_fetcher.fetch.assert_awaited_once()
        renderer.render.assert_not_called()
        assert stages.transitions() == [
            ("fetch-static", "started"),
            ("fetch-static", "success"),
            ("fetch-rendered", "skipped"),
        ]

    @pytest.mark.asyncio
    async def test_static_failure_renders_exactly_once(self):
        retriever, _, renderer = make_retriever(
            static_error=NetworkError("Server responded with error: 403 Forbidden", "http_status", http_status=403),
            render_result="<html>rendered</html>",
        )

        result = await retriever.retrieve(URL)

        assert result.ok
        assert result.method == FetchMethod.RENDERED
        assert result.html == "<html>rendered</html>"
        assert result.static_error.kind == "http_status"
        renderer.render.assert_called_once()
        assert renderer.render.call_args.args[0] == URL

    @pytest.mark.asyncio
    async def test_unexpected_static_exception_still_falls_back(self):
        retriever, _, renderer = make_retriever(
            static_error=ValueError("weird"),
            render_result="<html>rendered</html>",
        )

        result = await retriever.retrieve(URL)

        assert result.method == FetchMethod.RENDERED
        assert result.static_error.kind == "request_error"
        renderer.render.assert_called_once()

    @pytest.mark.asyncio
    async def test_both_stages_fail(self):
        retriever, _, renderer = make_retriever(
            static_error=NetworkError("Connection refused to https://example.com/.", "connection_refused"),
            render_error=RenderError("Navigation to https://example.com/ timed out after 10s"),
        )
        stages = StageLogger("req-2")

        result = await retriever.retrieve(URL, stage_logger=stages)

        assert not result.ok
        assert result.failed_stage == "fetch-rendered"
        renderer.render.assert_called_once()
        assert stages.transitions() == [
            ("fetch-static", "started"),
            ("fetch-static", "failure"),
            ("fetch-rendered", "started"),
            ("fetch-rendered", "failure"),
        ]

        error = result.to_error(URL)
        assert "blocking automated requests" in error.message
        assert "unknown" not in error.message.lower()
        assert error.failed_stage == "fetch-rendered"
        assert error.static_error.kind == "connection_refused"
        assert "timed out" in error.details
        assert error.status_code == 503

    @pytest.mark.asyncio
    async def test_unexpected_render_exception_becomes_render_error(self):
        retriever, _, _ = make_retriever(
            static_error=NetworkError("boom", "request_error"),
            render_error=RuntimeError("chrome crashed"),
        )

        result = await retriever.retrieve(URL)

        assert isinstance(result.render_error, RenderError)
        assert "chrome crashed" in result.render_error.message
        assert result.to_error(URL).status_code == 500
