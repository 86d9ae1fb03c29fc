"""Data model shared by the index builder and the client search engine."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple


@dataclass
class BookmarkRecord:
    """A single bookmark as extracted from a generated page.

    Produced entirely at build time and never mutated by the client.
    Absent fields are empty strings, an empty tag list or ``False``.
    """
    title: str = ""
    url: str = ""
    domain: str = ""
    tags: List[str] = field(default_factory=list)
    excerpt: str = ""
    collection: str = ""
    collection_url: str = ""
    date: str = ""
    favorite: bool = False
    image: str = ""
    page: str = ""

    def search_fields(self) -> Tuple[str, ...]:
        """Text fields matched by free-text queries (tags are matched separately)."""
        return (self.title, self.domain, self.excerpt)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the index artifact's key names and order."""
        return {
            "title": self.title,
            "url": self.url,
            "domain": self.domain,
            "tags": list(self.tags),
            "excerpt": self.excerpt,
            "collection": self.collection,
            "collectionUrl": self.collection_url,
            "date": self.date,
            "favorite": self.favorite,
            "image": self.image,
            "page": self.page,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BookmarkRecord":
        """Build a record from an index entry, defaulting any missing key.

        Raises:
            ValueError: If the entry is not an object or ``tags`` is not a list
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Index entry is not an object: {data!r}")

        tags = data.get("tags") or []
        if not isinstance(tags, list):
            raise ValueError(f"Index entry tags are not a list: {tags!r}")

        def text(key: str) -> str:
            value = data.get(key)
            return "" if value is None else str(value)

        return cls(
            title=text("title"),
            url=text("url"),
            domain=text("domain"),
            tags=[str(tag) for tag in tags],
            excerpt=text("excerpt"),
            collection=text("collection"),
            collection_url=text("collectionUrl"),
            date=text("date"),
            favorite=bool(data.get("favorite", False)),
            image=text("image"),
            page=text("page"),
        )


@dataclass
class CardView:
    """The attribute-level view of a bookmark card rendered on a page.

    Cards only expose title, domain and tags as attributes, so on-page
    filtering never sees the excerpt.
    """
    title: str = ""
    domain: str = ""
    tags: List[str] = field(default_factory=list)
    favorite: bool = False

    def search_fields(self) -> Tuple[str, ...]:
        return (self.title, self.domain)


@dataclass(frozen=True)
class FilterState:
    """Current filter selection, rebuilt from the URL on every read."""
    query: str = ""
    tag: str = ""
    favorites_only: bool = False

    @property
    def is_active(self) -> bool:
        return bool(self.query or self.tag or self.favorites_only)

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "FilterState":
        """Build a state from URL query parameters ``q``, ``tag`` and ``favorites``."""
        return cls(
            query=params.get("q") or "",
            tag=params.get("tag") or "",
            favorites_only=params.get("favorites") == "true",
        )
