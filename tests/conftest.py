"""Shared fixtures for tests."""
import json
import pytest

from bookmark_yard.dom import parse_document
from bookmark_yard.models import BookmarkRecord
from bookmark_yard.storage import MemoryStore
from bookmark_yard.url_state import Location


def card_html(
    title,
    url,
    tags="",
    date="",
    favorite=False,
    domain="example.com",
    excerpt="",
    collection=None,
    image="",
):
    """Render one bookmark card the way the site templates do."""
    parts = [
        f'<article class="bookmark-card" data-title="{title.lower()}" '
        f'data-domain="{domain}" data-tags="{tags}">',
        f'<h3><a href="{url}" target="_blank" rel="noopener">{title}</a></h3>',
        f'<span class="domain">{domain}</span>',
    ]
    if favorite:
        parts.append('<span class="favorite" title="Favorite">★</span>')
    if excerpt:
        parts.append(f'<p class="excerpt">{excerpt}</p>')
    if collection:
        parts.append(f'<a href="{collection[1]}" class="collection-link">{collection[0]}</a>')
    if date:
        parts.append(f'<span class="date">{date}</span>')
    if image:
        parts.append(f'<img src="{image}" alt="" class="bookmark-cover">')
    parts.append("</article>")
    return "\n".join(parts)


def page_html(cards, nav_groups=""):
    return f"""<!DOCTYPE html>
<html>
<body>
<aside class="sidebar">
  <div class="sidebar-search">
    <input type="search" id="search" placeholder="Search bookmarks">
  </div>
  <nav>
    <ul class="nav-list">
      <li><a href="/bookmark-yard/">Home</a></li>
    </ul>
    {nav_groups}
  </nav>
</aside>
<main>
  <header class="page-header"><h1>Bookmarks</h1></header>
  <section class="cards">
{cards}
  </section>
</main>
</body>
</html>
"""


NAV_GROUPS = """
<details class="nav-group" open>
  <summary> Collections </summary>
  <ul>
    <li><a href="/c/ai.html">AI Tools</a></li>
    <li><a href="/c/security.html">Security</a></li>
  </ul>
</details>
<details class="nav-group">
  <summary>Tags</summary>
  <ul>
    <li><a href="/t/python.html">python</a></li>
    <li><a href="/t/prompt.html">prompt engineering</a></li>
  </ul>
</details>
"""


@pytest.fixture
def ten_card_html():
    """A page with 10 cards, 3 of them tagged "ai" and 2 favorites."""
    cards = []
    for i in range(10):
        tags = "ai tools" if i < 3 else "web"
        cards.append(card_html(
            f"Bookmark {i}",
            f"https://site{i}.example.com",
            tags=tags,
            domain=f"site{i}.example.com",
            favorite=i in (0, 5),
            date=f"2024-01-{i + 1:02d}",
        ))
    return page_html("\n".join(cards), NAV_GROUPS)


@pytest.fixture
def document(ten_card_html):
    return parse_document(ten_card_html)


@pytest.fixture
def location():
    return Location("https://example.github.io/bookmark-yard/index.html")


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sample_records():
    return [
        BookmarkRecord(
            title="Prompt Engineering Guide",
            url="https://promptingguide.ai",
            domain="promptingguide.ai",
            tags=["ai", "prompt"],
            excerpt="Techniques for working with large language models.",
            date="2024-03-01",
            favorite=True,
        ),
        BookmarkRecord(
            title="OWASP Top Ten",
            url="https://owasp.org/top10",
            domain="owasp.org",
            tags=["security"],
            excerpt="The most critical web application risks.",
            date="2024-02-01",
        ),
        BookmarkRecord(
            title="HTTPX",
            url="https://www.python-httpx.org",
            domain="python-httpx.org",
            tags=["python", "api"],
            excerpt="A next-generation HTTP client.",
            date="2023-12-01",
        ),
    ]


class StubFetcher:
    """Index fetcher that returns canned entries and counts calls."""

    def __init__(self, entries=None, error=None):
        self.entries = entries or []
        self.error = error
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return json.loads(json.dumps(self.entries))


@pytest.fixture
def stub_fetcher(sample_records):
    return StubFetcher([r.to_dict() for r in sample_records])
