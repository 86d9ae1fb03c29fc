"""Tests for page_filter module."""
import pytest

from bookmark_yard.dom import has_class, is_displayed, is_open, parse_document
from bookmark_yard.models import FilterState
from bookmark_yard.page_filter import PageFilter, card_view, filter_sidebar

from conftest import card_html, page_html


@pytest.fixture
def page_filter(document):
    return PageFilter(document)


def visible_titles(page_filter):
    return [card["data-title"] for card in page_filter.cards() if not has_class(card, "hidden")]


def status_text(document):
    return document.find(id="filter-status").select_one(".filter-info").get_text()


class TestCardView:
    def test_reads_card_attributes(self, document):
        card = document.select(".bookmark-card")[0]
        view = card_view(card)
        assert view.title == "bookmark 0"
        assert view.domain == "site0.example.com"
        assert view.tags == ["ai", "tools"]
        assert view.favorite is True

    def test_card_without_favorite_marker(self, document):
        assert card_view(document.select(".bookmark-card")[1]).favorite is False


class TestApply:
    def test_tag_filter_scenario(self, document, page_filter):
        page_filter.apply(FilterState(tag="ai"))

        assert page_filter.visible_count() == 3
        assert "Tag: #ai (3 shown)" in status_text(document)

    def test_query_filter(self, page_filter):
        page_filter.apply(FilterState(query="Bookmark 1"))
        assert visible_titles(page_filter) == ["bookmark 1"]

    def test_query_matches_tags(self, page_filter):
        page_filter.apply(FilterState(query="too"))
        assert page_filter.visible_count() == 3

    def test_favorites_only(self, document, page_filter):
        page_filter.apply(FilterState(favorites_only=True))
        assert visible_titles(page_filter) == ["bookmark 0", "bookmark 5"]
        assert "Favorites only" in status_text(document)

    def test_combined_filters(self, document, page_filter):
        page_filter.apply(FilterState(query="site", tag="AI", favorites_only=True))
        assert visible_titles(page_filter) == ["bookmark 0"]
        assert status_text(document) == 'Filtering: Search: "site" | Tag: #AI | Favorites only (1 shown)'

    def test_clearing_unhides_everything(self, document, page_filter):
        page_filter.apply(FilterState(tag="ai"))
        page_filter.apply(FilterState())

        assert page_filter.visible_count() == 10
        assert not is_displayed(document.find(id="filter-status"))

    def test_status_created_once_in_header(self, document, page_filter):
        page_filter.apply(FilterState(tag="ai"))
        page_filter.apply(FilterState(tag="web"))

        statuses = document.find_all(id="filter-status")
        assert len(statuses) == 1
        assert statuses[0].parent.get("class") == ["page-header"]
        assert "Tag: #web (7 shown)" in status_text(document)

    def test_status_has_clear_button(self, document, page_filter):
        page_filter.apply(FilterState(query="bookmark"))
        button = document.find(id="filter-status").select_one("button.clear-filters")
        assert button.get_text() == "Clear filters"
        assert is_displayed(document.find(id="filter-status"))

    def test_excerpt_not_searched_on_page(self):
        html = page_html(card_html("Plain", "https://p.example.com", excerpt="hidden gem"))
        document = parse_document(html)
        PageFilter(document).apply(FilterState(query="gem"))
        assert PageFilter(document).visible_count() == 0

    def test_page_without_header(self):
        document = parse_document(card_html("Solo", "https://solo.example.com", tags="ai"))
        page_filter = PageFilter(document)
        page_filter.apply(FilterState(tag="ai"))
        assert page_filter.visible_count() == 1


class TestFilterSidebar:
    def test_hides_non_matching_links(self, document):
        filter_sidebar(document, "secur")
        items = {li.a.get_text(): is_displayed(li) for li in document.select(".nav-group ul li")}
        assert items == {
            "AI Tools": False,
            "Security": True,
            "python": False,
            "prompt engineering": False,
        }

    def test_opens_groups_with_matches(self, document):
        filter_sidebar(document, "python")
        groups = document.select(".nav-group")
        assert is_open(groups[1])

    def test_empty_query_shows_all(self, document):
        filter_sidebar(document, "secur")
        filter_sidebar(document, "")
        assert all(is_displayed(li) for li in document.select(".nav-group ul li"))
