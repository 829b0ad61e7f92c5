"""Link-header pagination over LMS collection endpoints."""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Type
from urllib.parse import urljoin

from pydantic import BaseModel, ValidationError
from requests.utils import parse_header_links

from ..utils.logging_config import get_logger
from ..utils.exceptions import DecodeError, PaginationError
from .fetcher import HttpFetcher

logger = get_logger()


@dataclass(frozen=True)
class PageCursor:
    """Continuation reference to the next page of a collection."""

    url: str


def parse_link_header(value: Optional[str]) -> Dict[str, str]:
    """
    Map each link relation in a Link header to its URL.

    Args:
        value: Raw Link header, e.g. '<https://x/a?page=2>; rel="next", <...>; rel="last"'

    Returns:
        Dict of relation name to URL (first occurrence wins)
    """
    links: Dict[str, str] = {}
    if not value:
        return links

    for link in parse_header_links(value):
        url = link.get("url", "").strip()
        # rel may list several space-separated relations
        for name in link.get("rel", "").split():
            links.setdefault(name, url)

    return links


def next_cursor(value: Optional[str]) -> Optional[PageCursor]:
    """Cursor for the ``next`` relation, or None when pagination is done."""
    url = parse_link_header(value).get("next")
    return PageCursor(url) if url else None


class Paginator:
    """Walks every page of a collection through an HttpFetcher."""

    def __init__(self, fetcher: HttpFetcher, per_page: int = 100):
        """
        Initialize paginator.

        Args:
            fetcher: Fetcher used for every page request
            per_page: Page size requested on the first page
        """
        self.fetcher = fetcher
        self.per_page = per_page

    def iter_pages(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Iterator[List[Any]]:
        """
        Yield the decoded JSON array of each page in order.

        Args:
            path: Collection path relative to the API base URL
            params: Query parameters for the first page

        Yields:
            List of raw items per page

        Raises:
            PaginationError: On a non-success status or a continuation loop
            DecodeError: If a page is not a JSON array
        """
        first_params = dict(params or {})
        first_params.setdefault("per_page", self.per_page)

        target: Optional[str] = path
        request_params: Optional[Dict[str, Any]] = first_params
        seen = set()
        page = 0

        while target is not None:
            result = self.fetcher.get(target, params=request_params)
            page += 1

            if not result.ok:
                raise PaginationError(
                    f"Page {page} of {path} returned status {result.status_code}",
                    status_code=result.status_code,
                )

            items = result.json()
            if not isinstance(items, list):
                raise DecodeError(
                    f"Page {page} of {path} is a {type(items).__name__}, expected a list"
                )
            yield items

            cursor = next_cursor(result.headers.get("Link"))
            if cursor is None:
                logger.debug(f"{path}: no next link after page {page}")
                return

            # Relative links are relative to the page that carried them
            next_url = urljoin(result.url, cursor.url) if result.url else cursor.url
            if next_url in seen:
                raise PaginationError(f"{path}: next link repeats {next_url}")
            seen.add(next_url)

            # The continuation URL already carries the query
            target = next_url
            request_params = None

    def iter_items(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        model: Optional[Type[BaseModel]] = None,
    ) -> Iterator[Any]:
        """
        Yield items across all pages, optionally validated into a model.

        Raises:
            DecodeError: If an item does not match the model
        """
        for items in self.iter_pages(path, params):
            for item in items:
                if model is None:
                    yield item
                    continue
                try:
                    yield model.model_validate(item)
                except ValidationError as e:
                    raise DecodeError(f"Unexpected item in {path}: {e}") from e

    def collect_all(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        model: Optional[Type[BaseModel]] = None,
    ) -> List[Any]:
        """Materialize every item of the collection."""
        items = list(self.iter_items(path, params, model))
        logger.info(f"Collected {len(items)} items from {path}")
        return items
