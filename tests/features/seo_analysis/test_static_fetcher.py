import httpx
import pytest

from app.features.seo_analysis.services.retrieval.static_fetcher import StaticFetcher
from app.platform.exceptions import NetworkError

URL = "https://example.com/"


def fetcher_for(handler):
    return StaticFetcher(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_returns_body_and_sends_browser_headers():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200, text="<html><title>Hi</title></html>")

    html = await fetcher_for(handler).fetch(URL, headers={"User-Agent": "TestAgent/1.0", "Accept": "text/html"})

    assert html == "<html><title>Hi</title></html>"
    assert seen["user-agent"] == "TestAgent/1.0"
    assert seen["accept"] == "text/html"


@pytest.mark.asyncio
async def test_default_headers_look_like_a_browser():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200, text="ok")

    await fetcher_for(handler).fetch(URL)

    assert "Mozilla/5.0" in seen["user-agent"]
    assert seen["accept"].startswith("text/html")
    assert seen["upgrade-insecure-requests"] == "1"


@pytest.mark.asyncio
async def test_follows_redirects():
    def handler(request):
        if request.url.path == "/":
            return httpx.Response(301, headers={"Location": "https://example.com/home"})
        return httpx.Response(200, text="home")

    assert await fetcher_for(handler).fetch(URL) == "home"


@pytest.mark.asyncio
async def test_too_many_redirects():
    def handler(request):
        return httpx.Response(302, headers={"Location": "https://example.com/loop"})

    with pytest.raises(NetworkError) as exc_info:
        await fetcher_for(handler).fetch(URL, max_redirects=5)
    assert exc_info.value.kind == "too_many_redirects"


@pytest.mark.asyncio
async def test_non_2xx_is_a_failure():
    def handler(request):
        return httpx.Response(403)

    with pytest.raises(NetworkError) as exc_info:
        await fetcher_for(handler).fetch(URL)

    error = exc_info.value
    assert error.kind == "http_status"
    assert error.http_status == 403
    assert error.message == "Server responded with error: 403 Forbidden"


@pytest.mark.asyncio
async def test_connection_refused_from_cause_chain():
    def handler(request):
        raise httpx.ConnectError("connect failed", request=request) from ConnectionRefusedError(111, "refused")

    with pytest.raises(NetworkError) as exc_info:
        await fetcher_for(handler).fetch(URL)
    assert exc_info.value.kind == "connection_refused"
    assert "blocking automated requests" in exc_info.value.message


@pytest.mark.asyncio
async def test_connection_refused_from_message():
    def handler(request):
        raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

    with pytest.raises(NetworkError) as exc_info:
        await fetcher_for(handler).fetch(URL)
    assert exc_info.value.kind == "connection_refused"


@pytest.mark.asyncio
async def test_host_not_found():
    def handler(request):
        raise httpx.ConnectError("[Errno -2] Name or service not known", request=request)

    with pytest.raises(NetworkError) as exc_info:
        await fetcher_for(handler).fetch(URL)
    assert exc_info.value.kind == "host_not_found"
    assert "not found" in exc_info.value.message


@pytest.mark.asyncio
async def test_read_timeout_means_no_response():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(NetworkError) as exc_info:
        await fetcher_for(handler).fetch(URL)
    assert exc_info.value.kind == "no_response"


@pytest.mark.asyncio
async def test_connect_timeout():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(NetworkError) as exc_info:
        await fetcher_for(handler).fetch(URL, timeout=15)
    assert exc_info.value.kind == "timeout"
    assert "15" in exc_info.value.message
