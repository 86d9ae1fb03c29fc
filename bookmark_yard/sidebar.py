"""Persistence of the sidebar's open/closed sections."""
import json
import sys
from typing import Dict, List

from bs4 import BeautifulSoup, Tag

from bookmark_yard.dom import is_open, set_open
from bookmark_yard.storage import KeyValueStore


def nav_groups(document: BeautifulSoup) -> List[Tag]:
    return document.select(".nav-group")


def group_label(group: Tag, index: int) -> str:
    """Key a section by its visible heading, falling back to its position."""
    summary = group.find("summary")
    if summary is not None:
        return summary.get_text().strip()
    return f"group-{index}"


class SidebarPersistence:
    """Write-through persistence of sidebar section state, keyed by label.

    Renaming a section loses its saved state; reordering does not.
    """

    def __init__(self, store: KeyValueStore, key: str = "sidebar-state"):
        self.store = store
        self.key = key

    def snapshot(self, document: BeautifulSoup) -> Dict[str, bool]:
        return {group_label(group, i): is_open(group) for i, group in enumerate(nav_groups(document))}

    async def save(self, document: BeautifulSoup) -> None:
        """Persist the open state of every section."""
        await self.store.set(self.key, json.dumps(self.snapshot(document)))

    async def restore(self, document: BeautifulSoup) -> None:
        """Apply the saved state to the page's sections.

        Sections without a saved entry keep their markup default. A corrupt
        saved value is reported and ignored.
        """
        saved = await self.store.get(self.key)
        if not saved:
            return

        try:
            state = json.loads(saved)
            if not isinstance(state, dict):
                raise ValueError(f"expected an object, got {type(state).__name__}")
        except ValueError as e:
            print(f"Failed to restore sidebar state: {e}", file=sys.stderr)
            return

        for i, group in enumerate(nav_groups(document)):
            label = group_label(group, i)
            if label in state:
                set_open(group, bool(state[label]))
