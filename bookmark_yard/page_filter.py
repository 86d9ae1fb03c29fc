"""Filtering of the bookmark cards rendered on the current page."""
from typing import List

from bs4 import BeautifulSoup, Tag

from bookmark_yard.dom import create_element, has_class, set_display, set_open, toggle_class
from bookmark_yard.models import CardView, FilterState
from bookmark_yard.predicates import matches


CARD_SELECTOR = ".bookmark-card"
STATUS_ID = "filter-status"


def card_view(card: Tag) -> CardView:
    """Read the filterable attributes of a bookmark card."""
    return CardView(
        title=card.get("data-title") or "",
        domain=card.get("data-domain") or "",
        tags=(card.get("data-tags") or "").split(),
        favorite=card.select_one(".favorite") is not None,
    )


def describe_filters(state: FilterState) -> List[str]:
    filters = []
    if state.query:
        filters.append(f'Search: "{state.query}"')
    if state.tag:
        filters.append(f"Tag: #{state.tag}")
    if state.favorites_only:
        filters.append("Favorites only")
    return filters


class PageFilter:
    """Shows or hides the page's bookmark cards for a filter state."""

    def __init__(self, document: BeautifulSoup):
        self.document = document

    def cards(self) -> List[Tag]:
        return self.document.select(CARD_SELECTOR)

    def visible_count(self) -> int:
        return sum(1 for card in self.cards() if not has_class(card, "hidden"))

    def apply(self, state: FilterState) -> None:
        """Toggle the ``hidden`` class on every card and refresh the status line.

        Args:
            state: Filters to apply
        """
        for card in self.cards():
            show = matches(card_view(card), state.query, state.tag, state.favorites_only)
            toggle_class(card, "hidden", not show)

        self.update_status(state)

    def _status_element(self) -> Tag:
        status = self.document.find(id=STATUS_ID)
        if status is None:
            status = create_element(self.document, "div", id=STATUS_ID)
            header = self.document.select_one(".page-header")
            if header is not None:
                header.append(status)
        return status

    def update_status(self, state: FilterState) -> None:
        """Summarize the active filters and the number of visible cards."""
        status = self._status_element()
        filters = describe_filters(state)

        if not filters:
            set_display(status, "none")
            return

        status.clear()
        info = create_element(
            self.document,
            "span",
            f"Filtering: {' | '.join(filters)} ({self.visible_count()} shown)",
            class_="filter-info",
        )
        status.append(info)
        status.append(create_element(self.document, "button", "Clear filters", class_="clear-filters"))
        set_display(status, "flex")


def filter_sidebar(document: BeautifulSoup, query: str) -> None:
    """Hide sidebar links that don't contain the query and open groups that do."""
    q = query.lower()

    for group in document.select(".nav-group"):
        has_match = False

        for link in group.select("ul li a"):
            found = not q or q in link.get_text().lower()
            set_display(link.parent, "" if found else "none")
            if found and q:
                has_match = True

        if q and has_match:
            set_open(group, True)
