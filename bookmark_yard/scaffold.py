"""Idempotent creation of the search and filter controls."""
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from bookmark_yard.dom import create_element, set_display
from bookmark_yard.search import RESULTS_ID


FAVORITES_TOGGLE_ID = "favorites-toggle"
QUICK_FILTERS_ID = "quick-filters"
CLEAR_SEARCH_ID = "sidebar-clear-search"


def create_search_results_container(document: BeautifulSoup) -> Optional[Tag]:
    """Add the global search results panel to the sidebar search box."""
    existing = document.find(id=RESULTS_ID)
    if existing is not None:
        return existing

    wrapper = document.select_one(".sidebar-search")
    if wrapper is None:
        return None

    container = create_element(document, "div", id=RESULTS_ID, class_="global-search-results")
    wrapper.append(container)
    return container


def create_favorites_toggle(document: BeautifulSoup) -> Optional[Tag]:
    """Append a "Favorites Only" button to the navigation list."""
    existing = document.find(id=FAVORITES_TOGGLE_ID)
    if existing is not None:
        return existing

    nav_list = document.select_one(".nav-list")
    if nav_list is None:
        return None

    button = create_element(document, "button", id=FAVORITES_TOGGLE_ID, class_="favorites-toggle-btn")
    button.append(create_element(document, "span", "★", class_="fav-icon"))
    button.append(" Favorites Only")

    item = create_element(document, "li")
    item.append(button)
    nav_list.append(item)
    return button


def create_quick_filters(document: BeautifulSoup, terms: Iterable[str]) -> Optional[Tag]:
    """Insert one shortcut button per search term at the top of the main content."""
    existing = document.find(id=QUICK_FILTERS_ID)
    if existing is not None:
        return existing

    main = document.find("main")
    if main is None:
        return None

    container = create_element(document, "div", id=QUICK_FILTERS_ID, class_="quick-filters")
    container.append(create_element(document, "span", "Quick search:", class_="quick-filters-label"))
    for term in terms:
        container.append(
            create_element(document, "button", term, class_="quick-filter-btn", **{"data-term": term})
        )

    main.insert(0, container)
    return container


def update_clear_button(document: BeautifulSoup, active: bool) -> None:
    """Show the "Clear search" button while any filter is active.

    The button is created on first use and only hidden afterwards.
    """
    wrapper = document.select_one(".sidebar-search")
    if wrapper is None:
        return

    button = document.find(id=CLEAR_SEARCH_ID)
    if active:
        if button is None:
            button = create_element(document, "button", "✕ Clear search", id=CLEAR_SEARCH_ID, class_="sidebar-clear-btn")
            wrapper.append(button)
        set_display(button, "block")
    elif button is not None:
        set_display(button, "none")
