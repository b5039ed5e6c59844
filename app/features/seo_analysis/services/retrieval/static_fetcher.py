import socket
from typing import Dict, Iterator, Optional

import httpx

from app.platform.config import settings
from app.platform.exceptions import NetworkError

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


def default_headers(user_agent: Optional[str] = None) -> Dict[str, str]:
    return {"User-Agent": user_agent or settings.USER_AGENT, **BROWSER_HEADERS}


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


class StaticFetcher:
    """Plain HTTP retrieval, no script execution."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        # transport is swappable so tests can use httpx.MockTransport
        self.transport = transport

    async def fetch(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
    ) -> str:
        """
        GET ``url`` and return the body text.

        Raises:
            NetworkError: classified by ``kind`` for every failure, including
                non-2xx responses.
        """
        timeout = settings.STATIC_FETCH_TIMEOUT if timeout is None else timeout
        max_redirects = (
            settings.STATIC_FETCH_MAX_REDIRECTS if max_redirects is None else max_redirects
        )

        try:
            async with httpx.AsyncClient(
                headers=headers or default_headers(),
                timeout=timeout,
                follow_redirects=True,
                max_redirects=max_redirects,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            reason = e.response.reason_phrase
            raise NetworkError(
                f"Server responded with error: {code} {reason}".rstrip(),
                "http_status",
                http_status=code,
                reason=reason,
            ) from e
        except httpx.TooManyRedirects as e:
            raise NetworkError(
                f"Too many redirects (>{max_redirects}) while fetching {url}",
                "too_many_redirects",
            ) from e
        except (httpx.ReadTimeout, httpx.RemoteProtocolError) as e:
            raise NetworkError(
                f"No response received from {url}. The website might be blocking automated requests.",
                "no_response",
            ) from e
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request to {url} timed out after {timeout}s", "timeout") from e
        except httpx.ConnectError as e:
            raise StaticFetcher.classify_connect_error(url, e) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Error setting up the request: {e}", "request_error") from e

    @staticmethod
    def classify_connect_error(url: str, exc: Exception) -> NetworkError:
        """Tell connection refused apart from DNS failure by walking the cause chain."""
        for cause in _exception_chain(exc):
            if isinstance(cause, ConnectionRefusedError):
                return StaticFetcher._refused(url)
            if isinstance(cause, socket.gaierror):
                return StaticFetcher._not_found(url)

        text = str(exc).lower()
        if "connection refused" in text:
            return StaticFetcher._refused(url)
        if any(marker in text for marker in _DNS_FAILURE_MARKERS):
            return StaticFetcher._not_found(url)
        return NetworkError(f"Could not connect to {url}: {exc}", "request_error")

    @staticmethod
    def _refused(url: str) -> NetworkError:
        return NetworkError(
            f"Connection refused to {url}. The website might be blocking automated requests.",
            "connection_refused",
        )

    @staticmethod
    def _not_found(url: str) -> NetworkError:
        return NetworkError(
            f"Domain {url} not found. Please check if the URL is correct.",
            "host_not_found",
        )
