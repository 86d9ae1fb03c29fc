"""Bookmark card extraction from generated HTML pages."""
import re
from pathlib import Path
from typing import Iterator, Optional

from bookmark_yard.models import BookmarkRecord


# A card must carry data-title, data-domain and data-tags, in that order.
CARD_RE = re.compile(
    r'<article class="bookmark-card"[^>]*'
    r'data-title="([^"]*)"[^>]*'
    r'data-domain="([^"]*)"[^>]*'
    r'data-tags="([^"]*)"[^>]*>'
    r'(.*?)</article>',
    re.DOTALL,
)

LINK_RE = re.compile(r'<h3><a href="([^"]*)"[^>]*>([^<]*)</a></h3>')
EXCERPT_RE = re.compile(r'<p class="excerpt">([^<]*)</p>')
COLLECTION_RE = re.compile(r'<a href="([^"]*)" class="collection-link">([^<]*)</a>')
DATE_RE = re.compile(r'<span class="date">([^<]*)</span>')
COVER_RE = re.compile(r'<img src="([^"]*)"[^>]*class="bookmark-cover"')
FAVORITE_MARKER = 'class="favorite"'

# Only these entities are decoded; anything else is left untouched.
_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
)


def decode_entities(text: str) -> str:
    """Decode the handful of named entities the page templates emit.

    Args:
        text: Raw attribute or element text

    Returns:
        Text with ``&amp; &lt; &gt; &quot; &#39; &nbsp;`` replaced
    """
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def _group(match: Optional[re.Match], index: int) -> str:
    return match.group(index) if match else ""


def extract_bookmarks(html: str, page: str) -> Iterator[BookmarkRecord]:
    """Yield a record for every well-formed bookmark card in a page.

    Cards without an ``<h3><a href=...>`` title link are skipped.

    Args:
        html: Page markup
        page: Root-relative path of the page, recorded on every record

    Yields:
        BookmarkRecord per card, in page order
    """
    for card in CARD_RE.finditer(html):
        _, data_domain, data_tags, content = card.groups()

        link = LINK_RE.search(content)
        if link is None:
            continue

        excerpt = EXCERPT_RE.search(content)
        collection = COLLECTION_RE.search(content)
        date = DATE_RE.search(content)
        cover = COVER_RE.search(content)

        yield BookmarkRecord(
            title=decode_entities(link.group(2)),
            url=link.group(1),
            domain=decode_entities(data_domain),
            tags=[decode_entities(t) for t in data_tags.split(" ") if t],
            excerpt=decode_entities(_group(excerpt, 1)),
            collection=decode_entities(_group(collection, 2)),
            collection_url=_group(collection, 1),
            date=_group(date, 1),
            favorite=FAVORITE_MARKER in content,
            image=_group(cover, 1),
            page=page,
        )


def relative_page_path(path: Path, root: Path) -> str:
    """Return a page path relative to the content root with forward slashes."""
    return path.relative_to(root).as_posix().lstrip("/")
