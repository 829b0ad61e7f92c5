"""Rate-governed client for the LMS API."""

from .rate_governor import RateGovernor, RateState
from .fetcher import HttpFetcher, FetchResult
from .pagination import Paginator, PageCursor, parse_link_header, next_cursor

__all__ = [
    "RateGovernor",
    "RateState",
    "HttpFetcher",
    "FetchResult",
    "Paginator",
    "PageCursor",
    "parse_link_header",
    "next_cursor",
]
