"""Filter predicates shared by on-page filtering and global search."""
from typing import List, Protocol, Tuple


class Filterable(Protocol):
    """Anything that can be matched: a full record or a card's attribute view."""
    tags: List[str]
    favorite: bool

    def search_fields(self) -> Tuple[str, ...]:
        ...


def matches_query(item: Filterable, query: str) -> bool:
    """Case-insensitive substring match against the item's text fields or any tag."""
    if not query:
        return True
    q = query.lower()
    if any(q in text.lower() for text in item.search_fields()):
        return True
    return any(q in tag.lower() for tag in item.tags)


def matches_tag(item: Filterable, tag: str) -> bool:
    """Exact, case-insensitive match against one of the item's tags."""
    if not tag:
        return True
    wanted = tag.lower()
    return any(t.lower() == wanted for t in item.tags)


def matches(item: Filterable, query: str = "", tag: str = "", favorites_only: bool = False) -> bool:
    """Decide whether an item is visible under the given filters.

    Each clause is skipped when its input is empty or false; all enabled
    clauses must pass.

    Args:
        item: Record or card view to test
        query: Free-text query
        tag: Tag that must be present
        favorites_only: Require the item to be a favorite

    Returns:
        True if the item passes every enabled clause
    """
    if not matches_query(item, query):
        return False
    if not matches_tag(item, tag):
        return False
    if favorites_only and not item.favorite:
        return False
    return True
