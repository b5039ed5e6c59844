import re
from urllib.parse import urlsplit, urlunsplit

from app.platform.exceptions import InvalidURL

_SCHEME_PREFIX = re.compile(r"^https?://", re.IGNORECASE)
_HOST_LABELS = re.compile(r"^[a-z0-9_-]+(\.[a-z0-9_-]+)*\.?$")
_DEFAULT_PORTS = {"http": 80, "https": 443}


def _normalize_host(hostname: str) -> str:
    # IPv6 literals come back from urlsplit without brackets
    if ":" in hostname:
        return f"[{hostname.lower()}]"

    try:
        host = hostname.encode("idna").decode("ascii").lower()
    except UnicodeError as e:
        raise ValueError(f"invalid host '{hostname}'") from e

    if not _HOST_LABELS.match(host):
        raise ValueError(f"invalid host '{hostname}'")
    return host


def normalize_url(url: str) -> str:
    """
    Canonicalize user input into an absolute http(s) URL.

    Trims whitespace, prepends ``https://`` when no http/https scheme is
    present, lowercases the host, drops default ports and gives an empty path
    a trailing ``/``. Raises InvalidURL when the result is not a usable URL.
    """
    raw = url
    url = (url or "").strip()

    if not _SCHEME_PREFIX.match(url):
        url = f"https://{url}"

    try:
        parsed = urlsplit(url)
        scheme = parsed.scheme.lower()
        if scheme not in ("http", "https"):
            raise ValueError(f"unsupported scheme '{parsed.scheme}'")
        if not parsed.hostname:
            raise ValueError("missing domain")
        if any(ch.isspace() for ch in parsed.netloc):
            raise ValueError("whitespace in domain")

        host = _normalize_host(parsed.hostname)
        port = parsed.port  # raises ValueError for out-of-range/non-numeric ports
    except ValueError as e:
        raise InvalidURL(raw, str(e)) from e

    netloc = host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{host}:{port}"
    if parsed.username is not None:
        userinfo = parsed.username
        if parsed.password is not None:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parsed.path or "/"
    return urlunsplit((scheme, netloc, path, parsed.query, parsed.fragment))
