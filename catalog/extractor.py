"""Read the product catalog out of the storefront page."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

from bs4 import BeautifulSoup

from .models import Product
from .tags import generate_search_tags
from .utils import render_page

logger = logging.getLogger(__name__)

CARD_SELECTOR = ".flip-card"
TITLE_SELECTOR = ".product-title"
DESCRIPTION_SELECTOR = ".product-description"
LINK_SELECTOR = ".explore-btn"
TYPE_ATTRIBUTE = "data-type"

Document = Union[BeautifulSoup, str]


def load_document(source: str) -> BeautifulSoup:
    """Parse the storefront page found at *source*.

    *source* may be an ``http(s)`` URL, raw HTML or a path to an HTML file.
    Pages that cannot be fetched or read produce an empty document.
    """

    if source.startswith(("http://", "https://")):
        html = render_page(source, wait_selector=CARD_SELECTOR)
        if not html:
            logger.warning("Storefront page %s could not be fetched", source)
    elif "<" in source:
        html = source
    else:
        try:
            html = Path(source).read_text(encoding="utf-8")
        except OSError:
            logger.warning("Storefront file %s could not be read", source)
            html = ""

    return BeautifulSoup(html or "", "html.parser")


def product_id_from_href(href: str) -> str:
    """Return the product id encoded in a link such as ``product7.html``."""

    return href.replace("product", "", 1).replace(".html", "", 1)


def _text_of(card, selector: str) -> str:
    tag = card.select_one(selector)
    return tag.get_text(" ", strip=True) if tag else ""


def extract_products(document: Document) -> List[Product]:
    """Return one :class:`Product` per card in *document*, in page order.

    Missing titles, descriptions, types or links become empty strings.
    """

    if isinstance(document, str):
        document = BeautifulSoup(document, "html.parser")

    products: List[Product] = []
    for card in document.select(CARD_SELECTOR):
        title = _text_of(card, TITLE_SELECTOR)
        description = _text_of(card, DESCRIPTION_SELECTOR)
        category = card.get(TYPE_ATTRIBUTE, "")

        link = card.select_one(LINK_SELECTOR)
        href = link.get("href", "") if link else ""
        if not href:
            logger.warning("Product card %r has no explore link", title)

        products.append(
            Product(
                id=product_id_from_href(href),
                title=title,
                description=description,
                category=category,
                tags=generate_search_tags(title, description, category),
                element=card,
            )
        )

    logger.info("Extracted %d products from storefront", len(products))
    return products
