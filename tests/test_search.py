import pytest
from bs4 import BeautifulSoup

from catalog.models import Product
from search import AdvancedSearch, SearchInitializationError, icon_for_type

ALL_IDS = [str(n) for n in range(1, 9)]


def test_from_document_requires_search_controls():
    document = BeautifulSoup(
        '<input id="searchInput"><div id="searchSuggestions"></div>', "html.parser"
    )

    with pytest.raises(SearchInitializationError) as excinfo:
        AdvancedSearch.from_document(document)

    assert "searchButton" in str(excinfo.value)


def test_from_document_extracts_catalog(storefront):
    assert [product.id for product in storefront.products] == ALL_IDS
    assert storefront.highlighted_index == -1


@pytest.mark.parametrize("query", ["", "   "])
def test_empty_query_shows_every_product(storefront, query):
    display = storefront.perform_search(query)

    assert display.visible == ALL_IDS
    assert display.hidden == []
    assert display.ranked is False
    assert display.banner is None


def test_perform_search_ranks_and_hides(storefront):
    display = storefront.perform_search("javascript")

    assert display.visible == ["1"]
    assert display.hidden == ALL_IDS[1:]
    assert display.ranked is True
    assert display.banner.text == 'Showing 1 result for "javascript"'


def test_perform_search_reports_plural_counts(storefront):
    display = storefront.perform_search("e")

    assert len(display.visible) == 8
    assert display.banner.text == 'Showing 8 results for "e"'


def test_perform_search_without_hits(storefront):
    display = storefront.perform_search("zzqq")

    assert display.visible == []
    assert display.hidden == ALL_IDS
    assert display.banner.text == 'No results found for "zzqq"'


def test_abbreviation_finds_developer_resources(storefront):
    display = storefront.perform_search("dev")

    assert sorted(display.visible[:2]) == ["2", "7"]


def test_misspelled_query_finds_javascript_guide(storefront):
    display = storefront.perform_search("javscript")

    assert display.visible[0] == "1"
    assert display.results[0].score > 0


def test_suggestions_are_truncated_and_sorted(storefront):
    panel = storefront.show_suggestions("e")

    assert panel.visible is True
    assert len(panel.rows) == 5
    relevances = [row.relevance for row in panel.rows]
    assert relevances == sorted(relevances, reverse=True)


def test_suggestion_ties_keep_catalog_order():
    products = [Product(pid, "Alpha Pack", "", "zip") for pid in "gfedcba"]
    search = AdvancedSearch(products)

    panel = search.show_suggestions("alpha")

    assert [row.product_id for row in panel.rows] == list("gfedc")


def test_suggestion_rows_carry_icon_and_highlights(storefront):
    row = storefront.show_suggestions("react").rows[0]

    assert row.product_id == "2"
    assert row.icon == "file-code"
    assert [tuple(segment) for segment in row.title] == [
        ("React", True),
        (" Component Library", False),
    ]
    assert row.relevance > 0


def test_empty_query_hides_suggestions(storefront):
    storefront.show_suggestions("react")
    storefront.on_key_down("ArrowDown")

    panel = storefront.show_suggestions("  ")

    assert panel.visible is False
    assert panel.rows == []
    assert storefront.highlighted_index == -1


def test_no_suggestions_shows_placeholder(storefront):
    panel = storefront.show_suggestions("zzqq")

    assert panel.visible is True
    assert panel.rows == []
    assert panel.empty_message == 'No matching resources found for "zzqq"'


def test_arrow_keys_cycle_through_suggestions(storefront):
    storefront.on_query_changed("e")

    storefront.on_key_down("ArrowDown")
    assert storefront.highlighted_index == 0
    assert [row.highlighted for row in storefront.panel.rows] == [True, False, False, False, False]

    storefront.on_key_down("ArrowUp")
    assert storefront.highlighted_index == 4

    storefront.on_key_down("ArrowDown")
    assert storefront.highlighted_index == 0


def test_arrow_up_from_nothing_selects_last(storefront):
    storefront.on_query_changed("e")

    storefront.on_key_down("ArrowUp")

    assert storefront.highlighted_index == 4
    assert storefront.panel.rows[4].highlighted is True


def test_arrow_keys_without_rows_do_nothing(storefront):
    storefront.on_query_changed("zzqq")

    instruction = storefront.on_key_down("ArrowDown")

    assert storefront.highlighted_index == -1
    assert instruction.products is None


def test_enter_on_highlighted_row_clicks_it(storefront):
    storefront.on_query_changed("react")
    storefront.on_key_down("ArrowDown")

    instruction = storefront.on_key_down("Enter")

    assert instruction.input_value == "React Component Library"
    assert instruction.products.visible[0] == "2"
    assert instruction.suggestions.visible is False
    assert storefront.highlighted_index == -1


def test_enter_without_highlight_submits_query(storefront):
    storefront.on_query_changed("javascript")

    instruction = storefront.on_key_down("Enter")

    assert instruction.products.visible == ["1"]
    assert instruction.input_value is None
    assert instruction.suggestions.visible is False


def test_on_submit_uses_given_value(storefront):
    instruction = storefront.on_submit("zzqq")

    assert instruction.products.banner.count == 0
    assert storefront.query == "zzqq"


def test_suggestion_click_out_of_range(storefront):
    storefront.on_query_changed("react")

    with pytest.raises(IndexError):
        storefront.on_suggestion_clicked(7)


def test_outside_click_closes_panel(storefront):
    storefront.on_query_changed("e")
    storefront.on_key_down("ArrowDown")

    instruction = storefront.on_outside_click()

    assert instruction.suggestions.visible is False
    assert storefront.highlighted_index == -1
    assert not any(row.highlighted for row in instruction.suggestions.rows)


@pytest.mark.parametrize(
    "category,icon",
    [("pdf", "file-pdf"), ("music", "file-audio"), ("font", "file"), ("", "file")],
)
def test_icon_for_type(category, icon):
    assert icon_for_type(category) == icon
