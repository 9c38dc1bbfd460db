"""Search entrypoints for the storefront page.

:class:`AdvancedSearch` turns search box events into render instructions. It
never touches the page itself; :mod:`render` applies the instructions to a
parsed document and the Flask app serializes them for the browser.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from catalog.extractor import extract_products
from catalog.models import Product
from ranking.highlight import Segment, highlight_segments
from ranking.scoring import SearchResult, rank_products

logger = logging.getLogger(__name__)

SEARCH_INPUT_ID = "searchInput"
SEARCH_BUTTON_ID = "searchButton"
SUGGESTIONS_ID = "searchSuggestions"
REQUIRED_CONTROLS = (SEARCH_INPUT_ID, SEARCH_BUTTON_ID, SUGGESTIONS_ID)

SUGGESTION_LIMIT = 5
NO_SELECTION = -1

ICONS = {
    "pdf": "file-pdf",
    "code": "file-code",
    "zip": "file-archive",
    "image": "file-image",
    "video": "file-video",
    "music": "file-audio",
}
DEFAULT_ICON = "file"


class SearchInitializationError(RuntimeError):
    """Raised when the page lacks a control the search box depends on."""


def icon_for_type(category: str) -> str:
    return ICONS.get(category, DEFAULT_ICON)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class ResultsBanner:
    count: int
    query: str

    @property
    def prefix(self) -> str:
        if self.count == 0:
            return "No results found for "
        plural = "" if self.count == 1 else "s"
        return f"Showing {self.count} result{plural} for "

    @property
    def text(self) -> str:
        return f'{self.prefix}"{self.query}"'

    def to_dict(self) -> dict:
        return {"count": self.count, "query": self.query, "text": self.text}


@dataclass
class ProductDisplay:
    """Which cards to show, in which order, and the banner above them.

    ``ranked`` is False when the grid goes back to plain catalog order.
    """

    visible: List[str]
    hidden: List[str] = field(default_factory=list)
    ranked: bool = False
    banner: Optional[ResultsBanner] = None
    results: List[SearchResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "visible": self.visible,
            "hidden": self.hidden,
            "ranked": self.ranked,
            "banner": self.banner.to_dict() if self.banner else None,
            "results": [result.to_dict() for result in self.results],
        }


@dataclass
class SuggestionRow:
    product_id: str
    icon: str
    title: List[Segment]
    description: List[Segment]
    relevance: int
    highlighted: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "icon": self.icon,
            "title": [list(segment) for segment in self.title],
            "description": [list(segment) for segment in self.description],
            "relevance": self.relevance,
            "highlighted": self.highlighted,
        }


@dataclass
class SuggestionPanel:
    visible: bool = False
    rows: List[SuggestionRow] = field(default_factory=list)
    empty_message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "visible": self.visible,
            "rows": [row.to_dict() for row in self.rows],
            "empty_message": self.empty_message,
        }


@dataclass
class RenderInstruction:
    """Everything a page adapter needs to redraw after one event.

    ``products`` is None when the product grid should stay as it is.
    ``input_value`` is None when the search box keeps its text.
    """

    suggestions: SuggestionPanel
    products: Optional[ProductDisplay] = None
    input_value: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "products": self.products.to_dict() if self.products else None,
            "suggestions": self.suggestions.to_dict(),
            "input_value": self.input_value,
        }


class AdvancedSearch:
    """Ranked search and live suggestions over a fixed product catalog."""

    def __init__(self, products: Iterable[Product]):
        self.products: Tuple[Product, ...] = tuple(products)
        self.highlighted_index = NO_SELECTION
        self.query = ""
        self.panel = SuggestionPanel()
        self._suggested: List[Product] = []

    @classmethod
    def from_document(cls, document: BeautifulSoup) -> "AdvancedSearch":
        """Build a search over the cards in *document*.

        Raises :class:`SearchInitializationError` if the search input, button
        or suggestion panel is missing from the page.
        """

        missing = [control for control in REQUIRED_CONTROLS if document.find(id=control) is None]
        if missing:
            raise SearchInitializationError(
                "Storefront page is missing search controls: " + ", ".join(missing)
            )

        return cls(extract_products(document))

    def find_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    # -- ranking -----------------------------------------------------------

    def perform_search(self, query: str) -> ProductDisplay:
        if not query.strip():
            return ProductDisplay(visible=[product.id for product in self.products])

        results = rank_products(self.products, query)
        logger.info("Query %r matched %d of %d products", query, len(results), len(self.products))

        visible = [result.product.id for result in results]
        shown = set(visible)
        hidden = [product.id for product in self.products if product.id not in shown]
        return ProductDisplay(
            visible=visible,
            hidden=hidden,
            ranked=True,
            banner=ResultsBanner(len(results), query),
            results=results,
        )

    def show_suggestions(self, query: str) -> SuggestionPanel:
        self.highlighted_index = NO_SELECTION

        if not query.strip():
            self._suggested = []
            self.panel = SuggestionPanel()
            return self.panel

        results = rank_products(self.products, query, limit=SUGGESTION_LIMIT)
        self._suggested = [result.product for result in results]

        if not results:
            self.panel = SuggestionPanel(
                visible=True,
                empty_message=f'No matching resources found for "{query}"',
            )
            return self.panel

        rows = [
            SuggestionRow(
                product_id=result.product.id,
                icon=icon_for_type(result.product.category),
                title=highlight_segments(result.product.title, query),
                description=highlight_segments(result.product.description, query),
                relevance=_round_half_up(result.score),
            )
            for result in results
        ]
        self.panel = SuggestionPanel(visible=True, rows=rows)
        return self.panel

    # -- event handlers ----------------------------------------------------

    def _hide_panel(self) -> SuggestionPanel:
        self.highlighted_index = NO_SELECTION
        self._mark_highlighted(self.panel.rows)
        self.panel = SuggestionPanel(visible=False, rows=self.panel.rows)
        return self.panel

    def on_query_changed(self, value: str) -> RenderInstruction:
        self.query = value
        return RenderInstruction(suggestions=self.show_suggestions(value))

    def on_submit(self, value: Optional[str] = None) -> RenderInstruction:
        if value is not None:
            self.query = value
        display = self.perform_search(self.query)
        return RenderInstruction(suggestions=self._hide_panel(), products=display)

    def on_suggestion_clicked(self, index: int) -> RenderInstruction:
        if not 0 <= index < len(self._suggested):
            raise IndexError(f"No suggestion at position {index}")

        title = self._suggested[index].title
        self.query = title
        display = self.perform_search(title)
        return RenderInstruction(suggestions=self._hide_panel(), products=display, input_value=title)

    def on_key_down(self, key: str) -> RenderInstruction:
        rows = self.panel.rows if self.panel.visible else []

        if key == "Enter":
            if self.highlighted_index >= 0 and rows:
                return self.on_suggestion_clicked(self.highlighted_index)
            return self.on_submit()

        if rows and key in ("ArrowDown", "ArrowUp"):
            if key == "ArrowUp" and self.highlighted_index == NO_SELECTION:
                self.highlighted_index = len(rows) - 1
            else:
                step = 1 if key == "ArrowDown" else -1
                self.highlighted_index = (self.highlighted_index + step) % len(rows)
            self._mark_highlighted(rows)

        return RenderInstruction(suggestions=self.panel)

    def on_outside_click(self) -> RenderInstruction:
        return RenderInstruction(suggestions=self._hide_panel())

    def _mark_highlighted(self, rows: Sequence[SuggestionRow]) -> None:
        for index, row in enumerate(rows):
            row.highlighted = index == self.highlighted_index
