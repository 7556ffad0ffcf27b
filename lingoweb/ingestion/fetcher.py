"""Page retrieval through a cross-origin fetch proxy using httpx."""

import logging
from typing import Any
from urllib.parse import quote, urlparse

import httpx

from ..config import ProxyConfig
from ..models import PageContent
from .sanitizer import extract_title, sanitize_html

logger = logging.getLogger(__name__)

ALLORIGINS_ENDPOINT = "https://api.allorigins.win/get?url={url}"

# User agent to identify as a browser
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

NO_CONTENT_MESSAGE = "Could not retrieve content from the URL."


class FetchError(Exception):
    """The page could not be retrieved or unwrapped from the proxy envelope."""

    pass


def validate_url(url: str) -> str:
    """Check that a URL is an absolute http(s) URL.

    Args:
        url: The URL as typed by the user

    Returns:
        The stripped URL

    Raises:
        FetchError: If the URL is empty or not http/https with a host
    """
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise FetchError(f"Invalid URL: {url!r}")
    return url


class ContentFetcher:
    """Retrieves a remote page's raw HTML.

    Requests are routed through the relay selected by ``ProxyConfig.kind``
    and the page is unwrapped from the relay's JSON envelope. The ``direct``
    kind skips the relay entirely. Each fetch is a single attempt.
    """

    def __init__(self, config: ProxyConfig | None = None):
        """Initialize the fetcher.

        Args:
            config: Proxy configuration. Uses the allorigins relay if not provided.
        """
        self.config = config or ProxyConfig()

    @property
    def content_field(self) -> str:
        if self.config.kind == "allorigins":
            return "contents"
        return self.config.content_field

    def proxy_url(self, url: str) -> str:
        """Build the relay request URL for a target page."""
        if self.config.kind == "direct":
            return url
        endpoint = ALLORIGINS_ENDPOINT if self.config.kind == "allorigins" else self.config.endpoint
        if "{url}" not in endpoint:
            raise FetchError(f"Proxy endpoint has no {{url}} placeholder: {endpoint}")
        return endpoint.replace("{url}", quote(url, safe=""))

    def fetch(self, url: str) -> str:
        """Fetch the raw HTML of a page.

        Args:
            url: The page to fetch

        Returns:
            Raw HTML as a string

        Raises:
            FetchError: On invalid URL, network failure, non-2xx response,
                malformed envelope or empty content
        """
        url = validate_url(url)
        request_url = self.proxy_url(url)
        headers = {"User-Agent": DEFAULT_USER_AGENT}

        logger.info("Fetching %s via %s", url, self.config.kind)
        try:
            with httpx.Client(timeout=self.config.timeout, follow_redirects=True) as client:
                response = client.get(request_url, headers=headers)
                response.raise_for_status()
                if self.config.kind == "direct":
                    html = response.text
                else:
                    html = self._unwrap(response)
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out fetching {url}") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Proxy returned HTTP {e.response.status_code} for {url}"
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Network error fetching {url}: {e}") from e

        if not isinstance(html, str) or not html.strip():
            raise FetchError(NO_CONTENT_MESSAGE)

        logger.debug("Fetched %d characters from %s", len(html), url)
        return html

    def _unwrap(self, response: httpx.Response) -> Any:
        """Extract the page from the relay's JSON envelope."""
        try:
            envelope = response.json()
        except ValueError as e:
            raise FetchError("Proxy response is not valid JSON") from e

        if not isinstance(envelope, dict):
            raise FetchError("Proxy response is not a JSON object")

        return envelope.get(self.content_field)


def fetch_page(url: str, config: ProxyConfig | None = None) -> PageContent:
    """Fetch a page with a one-off fetcher and sanitize it.

    Raises:
        FetchError: If the page cannot be fetched or has no content left
            after sanitizing
    """
    raw_html = ContentFetcher(config).fetch(url)
    clean_html = sanitize_html(raw_html)
    if not clean_html:
        raise FetchError("The page has no displayable content.")
    return PageContent(
        url=url.strip(),
        raw_html=raw_html,
        clean_html=clean_html,
        title=extract_title(raw_html),
    )
