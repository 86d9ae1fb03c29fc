"""Keeps the page, the URL and persisted sidebar state in step with user input.

The URL is the authoritative filter state: every cycle rebuilds a
FilterState from it, and the page document and the sidebar store are
projections written through on change.

Input to the search box is debounced by an explicit two-state machine:

  IDLE --feed--> PENDING --feed--> PENDING (deadline restarted)
  PENDING --clock reaches deadline, poll--> IDLE (cycle runs once)

Time comes from a clock object so tests can drive it with VirtualClock.
"""
import asyncio
import time
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

from bs4 import BeautifulSoup, Tag

from bookmark_yard.config import ClientConfig, Config, get_config
from bookmark_yard.dom import closest, has_class, input_value, set_input_value, set_open, toggle_class
from bookmark_yard.fetch import HttpIndexFetcher, IndexFetcher
from bookmark_yard.models import FilterState
from bookmark_yard.page_filter import PageFilter, filter_sidebar
from bookmark_yard.scaffold import (
    FAVORITES_TOGGLE_ID,
    create_favorites_toggle,
    create_quick_filters,
    create_search_results_container,
    update_clear_button,
)
from bookmark_yard.search import GlobalSearch, IndexCache
from bookmark_yard.sidebar import SidebarPersistence
from bookmark_yard.storage import KeyValueStore, MemoryStore, get_state_store
from bookmark_yard.url_state import Location, UrlState


SEARCH_INPUT_ID = "search"


class Clock(Protocol):
    def now(self) -> float:
        """Current time in milliseconds."""
        ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic() * 1000


class VirtualClock:
    """Manually advanced clock for tests."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, ms: float) -> None:
        self._now += ms


class DebounceState(Enum):
    IDLE = "idle"
    PENDING = "pending"


class Debouncer:
    """Single-shot, last-input-wins delay."""

    def __init__(self, delay_ms: float, clock: Clock):
        self.delay_ms = delay_ms
        self.clock = clock
        self.state = DebounceState.IDLE
        self._value: Optional[str] = None
        self._deadline = 0.0

    @property
    def pending(self) -> bool:
        return self.state is DebounceState.PENDING

    def feed(self, value: str) -> None:
        """Record an input and restart the delay."""
        self._value = value
        self._deadline = self.clock.now() + self.delay_ms
        self.state = DebounceState.PENDING

    def remaining(self) -> float:
        """Milliseconds until the pending input settles (0 when idle or due)."""
        if not self.pending:
            return 0.0
        return max(0.0, self._deadline - self.clock.now())

    def poll(self) -> Optional[str]:
        """Return the settled input once the delay has elapsed, else None."""
        if not self.pending or self.clock.now() < self._deadline:
            return None
        value = self._value
        self._value = None
        self.state = DebounceState.IDLE
        return value

    def cancel(self) -> None:
        self._value = None
        self.state = DebounceState.IDLE


class StateSynchronizer:
    """Client-side filter and search engine for one page.

    Browser events are delivered as method calls: ``on_search_input`` for
    keystrokes, ``on_click`` for clicks anywhere in the document and
    ``on_sidebar_toggle`` when a sidebar section opens or closes. A host
    calls ``tick`` from its timer (or awaits ``run_until_settled``) to let
    debounced input through.
    """

    def __init__(
        self,
        document: BeautifulSoup,
        location: Location,
        store: Optional[KeyValueStore] = None,
        fetcher: Optional[IndexFetcher] = None,
        config: Optional[ClientConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.document = document
        self.config = config or get_config().client
        self.url = UrlState(location)
        self.page_filter = PageFilter(document)
        self.cache = IndexCache(fetcher or HttpIndexFetcher(self.config))
        self.global_search = GlobalSearch(document, self.cache, self.config)
        self.sidebar = SidebarPersistence(store or MemoryStore(), self.config.sidebar_state_key)
        self.debouncer = Debouncer(self.config.debounce_ms, clock or MonotonicClock())
        self.prefetch_task: Optional[asyncio.Future] = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def init(self) -> None:
        """Build missing controls, restore saved state and apply URL filters.

        Safe to call more than once.
        """
        create_search_results_container(self.document)
        create_favorites_toggle(self.document)
        create_quick_filters(self.document, self.config.quick_filters)

        await self.sidebar.restore(self.document)

        state = self.url.read()

        search_input = self.search_input()
        if search_input is not None and state.query:
            set_input_value(search_input, state.query)

        if state.is_active:
            if state.favorites_only:
                favorites = self.document.find(id=FAVORITES_TOGGLE_ID)
                if favorites is not None:
                    toggle_class(favorites, "active", True)
            self.page_filter.apply(state)
            if state.query:
                self.update_quick_filter_state(state.query)
            update_clear_button(self.document, True)

        if self.prefetch_task is None:
            self.prefetch_task = asyncio.ensure_future(self.cache.load())

    # ------------------------------------------------------------------
    # Search input
    # ------------------------------------------------------------------

    def search_input(self) -> Optional[Tag]:
        return self.document.find(id=SEARCH_INPUT_ID)

    def current_query(self) -> str:
        return input_value(self.search_input()).strip()

    def on_search_input(self, value: str) -> None:
        """Handle a keystroke in the search box."""
        search_input = self.search_input()
        if search_input is not None:
            set_input_value(search_input, value)
        self.debouncer.feed(value.strip())

    async def tick(self) -> bool:
        """Run the filter cycle if the debounced input has settled.

        Returns:
            True if a cycle ran
        """
        query = self.debouncer.poll()
        if query is None:
            return False
        await self.run_cycle(query)
        return True

    async def run_until_settled(self) -> None:
        """Sleep until pending input settles, then run its cycle."""
        while self.debouncer.pending:
            await asyncio.sleep(self.debouncer.remaining() / 1000)
            await self.tick()

    async def run_cycle(self, query: str) -> None:
        """Apply a settled query everywhere, in a fixed order."""
        params = self.url.read()
        state = FilterState(query=query, tag=params.tag, favorites_only=params.favorites_only)

        self.page_filter.apply(state)
        filter_sidebar(self.document, query)
        await self.global_search.perform(query)
        self.url.write(q=query)
        self.update_quick_filter_state(query)
        update_clear_button(self.document, state.is_active)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def update_quick_filter_state(self, query: str) -> None:
        """Highlight the quick-filter button whose term equals the query."""
        for button in self.document.select(".quick-filter-btn"):
            toggle_class(button, "active", button.get("data-term") == query.lower())

    def on_quick_filter(self, term: str) -> None:
        """Put a quick-filter term in the search box as if typed."""
        self.on_search_input(term)
        for button in self.document.select(".quick-filter-btn"):
            toggle_class(button, "active", button.get("data-term") == term)
        self.url.write(q=term)

    def on_favorites_click(self) -> None:
        """Flip the favorites-only filter."""
        button = self.document.find(id=FAVORITES_TOGGLE_ID)
        if button is None:
            return

        active = toggle_class(button, "active")
        params = self.url.read()
        state = FilterState(query=self.current_query(), tag=params.tag, favorites_only=active)

        self.url.write(favorites=active)
        self.page_filter.apply(state)
        update_clear_button(self.document, state.is_active)

    def on_tag_click(self, tag_el: Tag) -> bool:
        """Filter the page by a clicked tag chip.

        Returns:
            False if the tag is a real link and should navigate instead
        """
        if tag_el.name == "a" and tag_el.get("href"):
            return False

        text = tag_el.get_text()
        count = tag_el.select_one(".tag-count")
        if count is not None:
            text = text.replace(count.get_text(), "", 1)
        tag = text.strip()

        params = self.url.read()
        state = FilterState(query=self.current_query(), tag=tag, favorites_only=params.favorites_only)

        self.url.write(tag=tag)
        self.page_filter.apply(state)
        update_clear_button(self.document, state.is_active)
        return True

    def on_click(self, target: Tag) -> None:
        """Dispatch a click anywhere in the document."""
        if closest(target, "clear-filters") is not None or closest(target, "sidebar-clear-btn") is not None:
            self.clear_all_filters()
            return

        quick = closest(target, "quick-filter-btn")
        if quick is not None:
            self.on_quick_filter(quick.get("data-term") or "")
        elif closest(target, "favorites-toggle-btn") is not None:
            self.on_favorites_click()
        else:
            tag_el = closest(target, "tag")
            if tag_el is not None:
                self.on_tag_click(tag_el)

        if closest(target, "sidebar-search") is None:
            self.global_search.hide()

    def clear_all_filters(self) -> None:
        """Reset search box, favorites toggle, URL and every derived view."""
        self.debouncer.cancel()

        search_input = self.search_input()
        if search_input is not None:
            set_input_value(search_input, "")

        favorites = self.document.find(id=FAVORITES_TOGGLE_ID)
        if favorites is not None:
            toggle_class(favorites, "active", False)

        self.url.write(q="", tag="", favorites=False)
        self.page_filter.apply(FilterState())
        filter_sidebar(self.document, "")
        self.global_search.hide()
        update_clear_button(self.document, False)
        self.update_quick_filter_state("")

    # ------------------------------------------------------------------
    # Sidebar
    # ------------------------------------------------------------------

    async def on_sidebar_toggle(self, group: Optional[Tag] = None, is_open: Optional[bool] = None) -> None:
        """Persist sidebar state after a section opens or closes.

        Args:
            group: Section that was toggled, when the host hasn't updated it yet
            is_open: New open state for ``group``
        """
        if group is not None and is_open is not None and has_class(group, "nav-group"):
            set_open(group, is_open)
        await self.sidebar.save(self.document)


async def create_synchronizer(
    document: BeautifulSoup,
    location: Location,
    config: Optional[Config] = None,
    fetcher: Optional[IndexFetcher] = None,
    state_db_path: Optional[Path] = None,
) -> StateSynchronizer:
    """Create and initialize an engine backed by the SQLite state store.

    Args:
        document: Parsed page
        location: Page URL holder
        config: Configuration (defaults to the global config)
        fetcher: Index fetcher (defaults to HTTP)
        state_db_path: Overrides the configured state database path

    Returns:
        Initialized StateSynchronizer
    """
    config = config or get_config()
    store = await get_state_store(state_db_path or config.state_db_path)

    synchronizer = StateSynchronizer(
        document,
        location,
        store=store,
        fetcher=fetcher,
        config=config.client,
    )
    await synchronizer.init()
    return synchronizer
