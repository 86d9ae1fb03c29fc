"""Filter state stored in the page URL's query string."""
from typing import List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from bookmark_yard.models import FilterState


FILTER_PARAMS = ("q", "tag", "favorites")


class Location:
    """The current page URL plus a replace-only history.

    ``replace_state`` swaps the current URL without adding a history entry,
    so the history length never changes. Only the number of replacements
    is kept.
    """

    def __init__(self, href: str):
        self.href = href
        self.replace_count = 0

    @property
    def search(self) -> str:
        return urlsplit(self.href).query

    def replace_state(self, url: str) -> None:
        self.href = url
        self.replace_count += 1


def _set_param(pairs: List[Tuple[str, str]], key: str, value: str) -> List[Tuple[str, str]]:
    # Same as URLSearchParams.set: first occurrence replaced, later ones dropped
    result = []
    replaced = False
    for k, v in pairs:
        if k != key:
            result.append((k, v))
        elif not replaced:
            result.append((k, value))
            replaced = True
    if not replaced:
        result.append((key, value))
    return result


class UrlState:
    """Reads and rewrites the ``q``, ``tag`` and ``favorites`` URL parameters."""

    def __init__(self, location: Location):
        self.location = location

    def params(self) -> List[Tuple[str, str]]:
        return parse_qsl(self.location.search, keep_blank_values=True)

    def read(self) -> FilterState:
        """Rebuild the filter state from the current URL."""
        first = {}
        for key, value in self.params():
            first.setdefault(key, value)
        return FilterState.from_params(first)

    def write(self, q: Optional[str] = None, tag: Optional[str] = None, favorites: Optional[bool] = None) -> None:
        """Update filter parameters in place.

        Arguments left as None are not touched. Empty or false values remove
        the parameter; other parameters are preserved.

        Args:
            q: Free-text query
            tag: Tag filter
            favorites: Favorites-only flag
        """
        updates = {}
        if q is not None:
            updates["q"] = q
        if tag is not None:
            updates["tag"] = tag
        if favorites is not None:
            updates["favorites"] = "true" if favorites else ""

        pairs = self.params()
        for key, value in updates.items():
            if value:
                pairs = _set_param(pairs, key, value)
            else:
                pairs = [(k, v) for k, v in pairs if k != key]

        parts = urlsplit(self.location.href)
        url = urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(pairs), parts.fragment))
        self.location.replace_state(url)

    def write_state(self, state: FilterState) -> None:
        self.write(q=state.query, tag=state.tag, favorites=state.favorites_only)
