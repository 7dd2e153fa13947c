"""HTTP session construction for notification channels."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

import requests

from alertext.core.notify.models import HTTPClientConfig


class TimeoutSession(requests.Session):
    """Session that applies a default timeout to every request."""

    def __init__(self, timeout: float):
        super().__init__()
        self.timeout = timeout

    def request(self, method, url, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, **kwargs)


def build_session(config: HTTPClientConfig, user_agent: str = "alertext") -> requests.Session:
    """Create a requests session from transport settings.

    Args:
        config: HTTP client configuration
        user_agent: Value of the User-Agent header

    Returns:
        Configured session
    """
    session = TimeoutSession(timeout=config.timeout_seconds)
    session.headers["User-Agent"] = user_agent
    if config.ca_bundle:
        session.verify = config.ca_bundle
    else:
        session.verify = config.verify_ssl
    if config.proxy_url:
        session.proxies = {"http": config.proxy_url, "https": config.proxy_url}
    return session


def redact_url(url: str) -> str:
    """Strip the query string, which carries keys and tokens."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "<redacted>", ""))
