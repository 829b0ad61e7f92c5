"""Authenticated GET requests against the LMS API."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin, urlsplit

import requests
from requests.structures import CaseInsensitiveDict

from ..config import CanvasConfig, RateLimitConfig
from ..utils.logging_config import get_logger
from ..utils.exceptions import DecodeError, FetchError, TransportError
from .rate_governor import RateGovernor

logger = get_logger()

DEFAULT_PORTS = {"http": 80, "https": 443}


def _origin(url: str) -> Tuple[Optional[str], Optional[int]]:
    """Lowercased host and effective port of a URL."""
    parts = urlsplit(url)
    return parts.hostname, parts.port or DEFAULT_PORTS.get(parts.scheme)


@dataclass
class FetchResult:
    """Status, headers and raw body of one completed response."""

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Raises:
            DecodeError: If the body is not valid JSON
        """
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {self.url}: {e}") from e


class HttpFetcher:
    """Sends rate-governed GET requests with a bearer token."""

    def __init__(
        self,
        config: CanvasConfig,
        governor: RateGovernor,
        session: Optional[requests.Session] = None,
        rate_config: Optional[RateLimitConfig] = None,
    ):
        """
        Initialize fetcher.

        Args:
            config: API configuration (base URL, token, timeouts)
            governor: Shared rate governor
            session: requests session to reuse (created if omitted)
            rate_config: Names of the rate-limit headers to read
        """
        self.config = config
        self.governor = governor
        self.rate_config = rate_config or RateLimitConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {config.api_token}"})

        self.base_url = config.api_url.rstrip("/") + "/"
        self._base_origin = _origin(self.base_url)

        self.timeout = config.read_timeout
        if self.timeout < config.read_timeout_floor:
            logger.warning(
                f"Read timeout {self.timeout}s is too low, using {config.read_timeout_floor}s"
            )
            self.timeout = config.read_timeout_floor

    def resolve(self, path: str) -> str:
        """
        Build the absolute URL for an API path or continuation link.

        Raises:
            FetchError: If an absolute URL points at a different host
        """
        url = urljoin(self.base_url, path if urlsplit(path).scheme else path.lstrip("/"))
        if _origin(url) != self._base_origin:
            raise FetchError(f"Refusing to send credentials to foreign host: {url}")
        return url

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> FetchResult:
        """
        Perform one GET request.

        Args:
            path: Path relative to the API base URL, or an absolute URL on the same host
            params: Query parameters

        Returns:
            FetchResult for any HTTP status

        Raises:
            TransportError: If no response was received
        """
        url = self.resolve(path)
        self.governor.admit()

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            self.governor.skip()
            logger.error(f"Request to {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

        self.governor.observe(
            response.headers.get(self.rate_config.remaining_header),
            response.headers.get(self.rate_config.cost_header),
            response.status_code,
        )

        if not 200 <= response.status_code < 300:
            logger.debug(f"Status {response.status_code} for {url}")

        return FetchResult(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers),
            body=response.content,
            url=response.url or url,
        )
