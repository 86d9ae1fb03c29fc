"""Site-wide search over the prebuilt bookmark index."""
import re
import sys
from typing import List, Optional, Protocol, Sequence, Tuple

import httpx
from bs4 import BeautifulSoup, Tag

from bookmark_yard.config import ClientConfig, get_config
from bookmark_yard.dom import create_element, toggle_class
from bookmark_yard.fetch import IndexFetcher
from bookmark_yard.models import BookmarkRecord
from bookmark_yard.predicates import matches_query


RESULTS_ID = "global-search-results"


class SearchEngine(Protocol):
    """Protocol for search engines to allow extensibility."""

    def search(
        self, query: str, bookmarks: Sequence[BookmarkRecord], limit: Optional[int] = None
    ) -> List[BookmarkRecord]:
        """Search bookmarks based on query.

        Args:
            query: Search query string
            bookmarks: Bookmarks to search, in index order
            limit: Maximum number of results to return (None = all)

        Returns:
            List of matching bookmarks
        """
        ...


class SubstringSearchEngine:
    """Case-insensitive substring search that keeps index order."""

    def search(
        self, query: str, bookmarks: Sequence[BookmarkRecord], limit: Optional[int] = None
    ) -> List[BookmarkRecord]:
        """Return every bookmark whose title, domain, tags or excerpt contain the query.

        Args:
            query: Search query string
            bookmarks: Bookmarks to search, in index order
            limit: Maximum number of results to return (None = all)

        Returns:
            Matching bookmarks in index order
        """
        if not query or not bookmarks:
            return []

        results = [bookmark for bookmark in bookmarks if matches_query(bookmark, query)]

        return results if limit is None else results[:limit]


class IndexCache:
    """Lazily loaded, process-wide copy of the search index.

    Populated on first successful load and reused until the page is
    reloaded. Failed loads are not cached.
    """

    def __init__(self, fetcher: IndexFetcher):
        self.fetcher = fetcher
        self._records: Optional[List[BookmarkRecord]] = None

    @property
    def loaded(self) -> bool:
        return self._records is not None

    @property
    def records(self) -> Optional[List[BookmarkRecord]]:
        return self._records

    async def load(self) -> List[BookmarkRecord]:
        """Return the cached index, fetching it on first use.

        Returns:
            Index records, or an empty list if the index could not be loaded
        """
        if self._records is not None:
            return self._records

        try:
            entries = await self.fetcher.fetch()
            records = [BookmarkRecord.from_dict(entry) for entry in entries]
        except (httpx.HTTPError, ValueError) as e:
            print(f"Failed to load search index: {e}", file=sys.stderr)
            return []

        self._records = records
        return self._records


def split_highlight(text: str, query: str) -> List[Tuple[str, bool]]:
    """Split text into segments, flagging literal case-insensitive matches of the query.

    Args:
        text: Text to scan
        query: Substring to highlight; regex metacharacters are matched literally

    Returns:
        List of (segment, is_match) tuples covering the whole text
    """
    if not query:
        return [(text, False)] if text else []

    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    segments = []
    for i, part in enumerate(pattern.split(text)):
        # re.split with one capture group alternates plain text and matches
        if part:
            segments.append((part, i % 2 == 1))
    return segments


class GlobalSearch:
    """Runs queries against the index and renders the results panel."""

    def __init__(
        self,
        document: BeautifulSoup,
        cache: IndexCache,
        config: Optional[ClientConfig] = None,
        engine: Optional[SearchEngine] = None,
    ):
        self.document = document
        self.cache = cache
        self.config = config or get_config().client
        self.engine: SearchEngine = engine or SubstringSearchEngine()

    async def search(self, query: str) -> Optional[List[BookmarkRecord]]:
        """Search the whole index.

        Args:
            query: Search query string

        Returns:
            None when the query is too short to search, otherwise all
            matches in index order (possibly empty)
        """
        query = query.strip()
        if len(query) < self.config.min_query_length:
            return None

        index = await self.cache.load()
        return self.engine.search(query, index)

    async def perform(self, query: str) -> None:
        """Search and update the results panel."""
        results = await self.search(query)
        if results is None:
            self.hide()
            return
        self.render(results, query.strip())

    def _container(self) -> Optional[Tag]:
        return self.document.find(id=RESULTS_ID)

    def hide(self) -> None:
        container = self._container()
        if container is not None:
            toggle_class(container, "active", False)

    def _highlighted_title(self, title: str, query: str) -> Tag:
        el = create_element(self.document, "div", class_="search-result-title")
        for segment, matched in split_highlight(title, query):
            if matched:
                el.append(create_element(self.document, "mark", segment))
            else:
                el.append(segment)
        return el

    def _result_item(self, record: BookmarkRecord, query: str) -> Tag:
        item = create_element(
            self.document,
            "a",
            href=record.url,
            target="_blank",
            rel="noopener",
            class_="search-result-item",
        )
        item.append(self._highlighted_title(record.title, query))

        meta = create_element(self.document, "div", class_="search-result-meta")
        meta.append(create_element(self.document, "span", record.domain, class_="search-result-domain"))
        if record.favorite:
            meta.append(create_element(self.document, "span", "★", class_="search-result-fav"))
        if record.tags:
            meta.append(
                create_element(self.document, "span", ", ".join(record.tags[:3]), class_="search-result-tags")
            )
        item.append(meta)
        return item

    def render(self, results: Sequence[BookmarkRecord], query: str) -> None:
        """Render results into the panel and show it.

        Args:
            results: All matches, in index order
            query: Query used for the highlight and the empty message
        """
        container = self._container()
        if container is None:
            return

        container.clear()
        toggle_class(container, "active", True)

        if not results:
            container.append(
                create_element(self.document, "div", f'No results for "{query}"', class_="search-no-results")
            )
            return

        limit = self.config.max_results
        header = f"Found {len(results)} results"
        if len(results) > limit:
            header += f" (showing first {limit})"
        container.append(create_element(self.document, "div", header, class_="search-results-header"))

        for record in results[:limit]:
            container.append(self._result_item(record, query))
