"""Apply search render instructions to a parsed storefront page."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from bs4 import BeautifulSoup, Tag

from catalog.extractor import CARD_SELECTOR, LINK_SELECTOR, product_id_from_href
from ranking.highlight import Segment
from search import (
    SEARCH_INPUT_ID,
    SUGGESTIONS_ID,
    ProductDisplay,
    RenderInstruction,
    ResultsBanner,
    SuggestionPanel,
    SuggestionRow,
)

logger = logging.getLogger(__name__)

STORE_GRID_ID = "storeGrid"
RESULTS_INFO_ID = "searchResultsInfo"
SEARCH_CONTAINER_SELECTOR = ".search-container"
FILTER_BAR_SELECTOR = ".filter-bar"


def _set_style(tag: Tag, **properties: Optional[str]) -> None:
    """Update inline CSS properties on *tag*; ``None`` removes a property."""

    styles: Dict[str, str] = {}
    for declaration in tag.get("style", "").split(";"):
        name, _, value = declaration.partition(":")
        if name.strip():
            styles[name.strip()] = value.strip()

    for name, value in properties.items():
        if value is None:
            styles.pop(name, None)
        else:
            styles[name] = value

    if styles:
        tag["style"] = "; ".join(f"{name}: {value}" for name, value in styles.items())
    elif tag.has_attr("style"):
        del tag["style"]


def cards_by_id(document: BeautifulSoup) -> Dict[str, Tag]:
    cards: Dict[str, Tag] = {}
    for card in document.select(CARD_SELECTOR):
        link = card.select_one(LINK_SELECTOR)
        cards[product_id_from_href(link.get("href", "") if link else "")] = card
    return cards


def apply_product_display(document: BeautifulSoup, display: ProductDisplay) -> None:
    cards = cards_by_id(document)

    for product_id in display.hidden:
        if product_id in cards:
            _set_style(cards[product_id], display="none", order=None)

    for rank, product_id in enumerate(display.visible):
        card = cards.get(product_id)
        if card is None:
            logger.warning("No card on page for product %s", product_id)
            continue
        _set_style(card, display="block", order=str(rank) if display.ranked else None)

    grid = document.find(id=STORE_GRID_ID)
    if grid is not None:
        for product_id in display.visible:
            if product_id in cards:
                grid.append(cards[product_id].extract())

    apply_banner(document, display.banner)


def apply_banner(document: BeautifulSoup, banner: Optional[ResultsBanner]) -> None:
    info = document.find(id=RESULTS_INFO_ID)

    if banner is None:
        if info is not None:
            info.decompose()
        return

    if info is None:
        info = document.new_tag("div", id=RESULTS_INFO_ID, attrs={"class": "search-results-info"})
        filter_bar = document.select_one(FILTER_BAR_SELECTOR)
        container = document.select_one(SEARCH_CONTAINER_SELECTOR)
        if filter_bar is not None:
            filter_bar.insert_before(info)
        elif container is not None:
            container.insert_after(info)
        else:
            logger.warning("No filter bar or search container to place the results banner")
            return

    info.clear()
    info.append(banner.prefix + '"')
    strong = document.new_tag("strong")
    strong.string = banner.query
    info.append(strong)
    info.append('"')


def _append_segments(document: BeautifulSoup, parent: Tag, segments: Iterable[Segment]) -> None:
    for segment in segments:
        if segment.highlighted:
            span = document.new_tag("span", attrs={"class": "search-match-highlight"})
            span.string = segment.text
            parent.append(span)
        else:
            parent.append(segment.text)


def build_suggestion_row(document: BeautifulSoup, index: int, row: SuggestionRow) -> Tag:
    classes = "search-suggestion highlight" if row.highlighted else "search-suggestion"
    suggestion = document.new_tag(
        "div", attrs={"class": classes, "data-index": str(index), "data-product": row.product_id}
    )
    suggestion.append(document.new_tag("i", attrs={"class": f"fas fa-{row.icon}"}))

    body = document.new_tag("div")
    title = document.new_tag("strong")
    _append_segments(document, title, row.title)
    body.append(title)

    description = document.new_tag("div", attrs={"class": "suggestion-description"})
    _append_segments(document, description, row.description)
    body.append(description)

    relevance = document.new_tag("div", attrs={"class": "suggestion-relevance"})
    relevance.string = f"Relevance: {row.relevance}%"
    body.append(relevance)

    suggestion.append(body)
    return suggestion


def apply_suggestions(document: BeautifulSoup, panel: SuggestionPanel) -> None:
    container = document.find(id=SUGGESTIONS_ID)
    if container is None:
        logger.warning("Suggestion panel #%s not found on page", SUGGESTIONS_ID)
        return

    container.clear()
    if panel.empty_message is not None:
        empty = document.new_tag("div", attrs={"class": "no-results"})
        empty.append(document.new_tag("i", attrs={"class": "fas fa-search"}))
        message = document.new_tag("p")
        message.string = panel.empty_message
        empty.append(message)
        container.append(empty)
    else:
        for index, row in enumerate(panel.rows):
            container.append(build_suggestion_row(document, index, row))

    _set_style(container, display="block" if panel.visible else "none")


def apply_instruction(document: BeautifulSoup, instruction: RenderInstruction) -> BeautifulSoup:
    """Redraw *document* in place for *instruction* and return it."""

    if instruction.products is not None:
        apply_product_display(document, instruction.products)

    apply_suggestions(document, instruction.suggestions)

    if instruction.input_value is not None:
        search_input = document.find(id=SEARCH_INPUT_ID)
        if search_input is not None:
            search_input["value"] = instruction.input_value

    return document


def apply_badges(document: BeautifulSoup, product_ids: Iterable[str]) -> None:
    """Mark the cards of *product_ids* as popular, clearing older badges."""

    for badge in document.select(".popular-badge"):
        badge.decompose()

    cards = cards_by_id(document)
    for product_id in product_ids:
        card = cards.get(product_id)
        if card is None:
            continue
        front = card.select_one(".flip-card-front") or card
        badge = document.new_tag("div", attrs={"class": "popular-badge"})
        badge.string = "Popular"
        front.insert(0, badge)
